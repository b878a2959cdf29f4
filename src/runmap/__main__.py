from runmap.cli import cli

cli()
