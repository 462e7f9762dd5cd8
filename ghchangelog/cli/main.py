"""Main CLI entry point for ghchangelog."""

import logging

import click
from pydantic import ValidationError

from .. import __version__
from ..changelog import collect_changes, render
from ..config import Config, TOKEN_ENV_VAR, get_config
from ..exceptions import ConfigError
from ..github import GitHubClient


REQUIRED_OPTIONS = [
    ('from_tag', '--from'),
    ('to_tag', '--to'),
    ('owner', '--owner'),
    ('repos', '--repo'),
]


def validate_config(config: Config) -> None:
    """Fail with a usage error when a required setting is missing."""
    for field, flag in REQUIRED_OPTIONS:
        if not getattr(config, field):
            raise click.UsageError(f"Missing option '{flag}'.")

    if not config.github_token:
        raise click.UsageError(
            f"No GitHub token in '--token' or environment variable {TOKEN_ENV_VAR}."
        )


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.option('--from', '-f', 'from_tag', metavar='TAG', help='Start of changelog range, as a git tag or revision')
@click.option('--to', '-t', 'to_tag', metavar='TAG', help='End of changelog range, as a git tag or revision')
@click.option('--owner', '-o', help='GitHub owner or organization')
@click.option('--repo', '-r', 'repos', help='GitHub repo, or a comma-separated list of repos')
@click.option('--git-directory', '-d',
              help='Git working tree, or a root holding one working tree per repo (default: current directory)')
@click.option('--token', 'github_token', help=f'GitHub access token. If not provided, uses {TOKEN_ENV_VAR}')
@click.option('--all-prs', is_flag=True, help='List all pull requests, regardless of the label')
@click.option('--tab-output', is_flag=True, help='Output a table of pull requests')
@click.option('--contributors', is_flag=True, help='Append the list of contributors to the document')
@click.option('--output', help='Write the changelog to a file instead of stdout')
@click.option('--config-file', '-c', help='Path to JSON configuration file')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.version_option(__version__, '-v', '--version', prog_name='ghchangelog')
def cli(from_tag, to_tag, owner, repos, git_directory, github_token, all_prs, tab_output,
        contributors, output, config_file, debug):
    """GitHub pull request changelog generator."""

    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger = logging.getLogger('ghchangelog')

    try:
        config = get_config(
            config_file,
            from_tag=from_tag,
            to_tag=to_tag,
            owner=owner,
            repos=repos,
            git_directory=git_directory,
            github_token=github_token,
            all_prs=all_prs or None,
            tab_output=tab_output or None,
            contributors=contributors or None,
        )
    except (ConfigError, ValidationError) as e:
        raise click.UsageError(str(e))

    validate_config(config)

    client = GitHubClient(config.github_token, config.api_url, logger)
    changes = collect_changes(client, config)

    text = render(
        changes.entries,
        tab_output=config.tab_output,
        version=config.to_tag,
        contributors=changes.contributors if config.contributors else None,
    )

    if output:
        try:
            with open(output, 'w', encoding='utf-8') as f:
                f.write(text)
        except OSError as e:
            raise click.ClickException(f"Error writing to file {output}: {e}")
        logger.info(f"Changelog saved to: {output}")
    else:
        click.echo(text, nl=False)

    click.echo("Done.", err=True)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == '__main__':
    main()
