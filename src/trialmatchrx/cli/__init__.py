"""CLI entry point for trialmatchrx."""

import click

from trialmatchrx.cli.rank import evidence_cmd, rank_cmd


@click.group()
def main():
    """TrialMatchRX: deterministic clinical trial match scoring."""
    pass


main.add_command(rank_cmd)
main.add_command(evidence_cmd)
