#!/usr/bin/env python3
"""Batch generate, validate, and render sample maps to SVG.

Outputs go to /tmp/runmap_sample_renders/.

Usage:
    python scripts/render_samples.py [--seeds 5] [--theme light]
"""

from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from runmap.generate.generator import generate_map  # noqa: E402
from runmap.parser.model import MapConfig, Orientation  # noqa: E402
from runmap.render.svg import render_svg  # noqa: E402
from runmap.themes import THEMES  # noqa: E402
from runmap.validator import Severity, validate_map  # noqa: E402

OUTPUT_DIR = Path("/tmp/runmap_sample_renders")

SAMPLES: dict[str, MapConfig] = {
    "default": MapConfig(),
    "short_single_lane": MapConfig(
        num_rows=4, min_nodes_per_row=1, max_nodes_per_row=1, boss_row=2
    ),
    "wide": MapConfig(num_rows=10, min_nodes_per_row=5, max_nodes_per_row=8),
    "no_mini_boss": MapConfig(has_intermediate_boss=False),
    "horizontal": MapConfig(orientation=Orientation.HORIZONTAL, spacing_y=140),
    "jittered": MapConfig(randomize_node_positions=True, jitter_intensity=120),
}


def render_sample(
    name: str, config: MapConfig, seed: int, theme_name: str, output_dir: Path
) -> list[str]:
    """Generate one map and write its SVG. Returns a list of issues."""
    run_map = generate_map(config, rng=random.Random(seed))
    issues = [
        f"{v.severity.value.upper()}: {v.message}"
        for v in validate_map(run_map, config)
    ]

    svg_str = render_svg(
        run_map, THEMES[theme_name], orientation=config.orientation
    )
    (output_dir / f"{name}_{seed}.svg").write_text(svg_str)
    return issues


def main():
    parser = argparse.ArgumentParser(description="Batch render sample maps")
    parser.add_argument("--seeds", type=int, default=3, help="Seeds per sample")
    parser.add_argument(
        "--theme", choices=sorted(THEMES), default="dark", help="Visual theme"
    )
    args = parser.parse_args()

    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    print(f"Rendering {len(SAMPLES) * args.seeds} maps to {OUTPUT_DIR}/")
    print()

    max_name_len = max(len(name) for name in SAMPLES) + 4
    any_errors = False

    for name, config in SAMPLES.items():
        for seed in range(args.seeds):
            issues = render_sample(name, config, seed, args.theme, OUTPUT_DIR)
            status = "OK" if not issues else "ISSUES"
            if any(i.startswith(Severity.ERROR.value.upper()) for i in issues):
                status = "FAIL"
                any_errors = True

            print(f"  {f'{name}_{seed}':<{max_name_len}}  [{status}]")
            for issue in issues:
                print(f"    - {issue}")

    print(f"\nOutputs in: {OUTPUT_DIR}/")

    if any_errors:
        sys.exit(1)


if __name__ == "__main__":
    main()
