"""Command-line entry point: `html-inject --input index.html --js dist/js ...`"""

import logging
import subprocess

import click

from .config import DEFAULT_ETAG_ALGORITHM, InjectConfig
from .errors import HtmlInjectError
from .pipeline import run

log = logging.getLogger("mkdocs.plugins.html_inject")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--input", "input_path", metavar="PATH", help="HTML file to inject into.")
@click.option("--output", "output_path", metavar="PATH", help="Where to write the result (defaults to --input).")
@click.option("--css", metavar="PATTERN", help="Stylesheet file, directory or glob pattern.")
@click.option("--js", metavar="PATTERN", help="Script file, directory or glob pattern.")
@click.option("--remove", metavar="[SCOPE:]KEY", help="Strip <!-- remove:KEY --> blocks.")
@click.option("--ignore", metavar="PREFIX", help="Strip this prefix from injected paths.")
@click.option("--hash", "git_hash", is_flag=True, help="Replace <!-- inject:git-hash --> with the git revision.")
@click.option("--etag", is_flag=True, help="Append ?etag=<digest of content> to injected paths.")
@click.option(
    "--etag-algorithm",
    default=DEFAULT_ETAG_ALGORITHM,
    show_default=True,
    help="hashlib algorithm used for --etag.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(package_name="mkdocs-html-inject")
def main(input_path, output_path, css, js, remove, ignore, git_hash, etag, etag_algorithm, verbose):
    """Inject script/stylesheet tags, a git revision and conditional blocks into an HTML file."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(levelname)s: %(message)s")

    try:
        config = InjectConfig.from_options(
            input=input_path,
            output=output_path,
            css=css,
            js=js,
            remove=remove,
            ignore=ignore,
            git_hash=git_hash,
            etag=etag,
            etag_algorithm=etag_algorithm,
        )
    except ValueError as e:
        raise click.ClickException(str(e))

    try:
        output = run(config)
    except (HtmlInjectError, OSError, subprocess.SubprocessError) as e:
        raise click.ClickException(str(e))

    log.info("Injected %s", output)


if __name__ == "__main__":
    main()
