import click
import logging
import traceback
from typing import Dict, Tuple

from .session import BuildSession
from .sandbox import DockerSandbox
from .utils import setup_logger, parse_module_levels
from .exceptions import (
    YaibError,
    ConfigurationError,
    DefinitionError,
    BuildError,
)
from . import __version__


def parse_template_vars(ctx, param, values: Tuple[str, ...]) -> Dict[str, str]:
    """Parse repeated `name:value` (or `name=value`) options into a mapping"""
    template_vars = {}
    for raw in values:
        seps = [i for i in (raw.find(':'), raw.find('=')) if i > 0]
        if not seps:
            raise click.BadParameter(f"expected name:value, got '{raw}'")
        split = min(seps)
        name, value = raw[:split].strip(), raw[split + 1:]
        # forwarded sandbox arguments quote the value
        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            value = value[1:-1]
        template_vars[name] = value
    return template_vars


def setup_logging(debug: bool, log_levels: str = None, log_file: str = None):
    """Setup logger with debug and module-level configuration"""
    setup_logger(debug=debug, module_levels=parse_module_levels(log_levels), log_file=log_file)


def handle_errors(func):
    """Decorator mapping application errors to a single log line and exit status 1"""
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ConfigurationError as e:
            logging.error(f"Configuration error: {e}")
        except DefinitionError as e:
            logging.error(f"Definition error: {e}")
        except BuildError as e:
            logging.critical(f"Build error: {e}")
        except YaibError as e:
            logging.error(f"An unexpected application error occurred: {e}")
        except FileNotFoundError as e:
            logging.error(f"A required file was not found: {e}")
        ctx = click.get_current_context()
        if ctx.obj.get('debug'):
            traceback.print_exc()
        raise click.Abort()
    return wrapper


@handle_errors
def do_build(recipe: str, artifactdir: str, internal_image: str, template_vars: Dict[str, str],
             disable_sandbox: bool, debug: bool) -> int:
    """Execute build command"""
    sandbox = DockerSandbox(enabled=not disable_sandbox)
    forward_args = ['--debug'] if debug else []
    with BuildSession(
        recipe,
        sandbox,
        artifactdir=artifactdir,
        template_vars=template_vars,
        internal_image=internal_image,
        forward_args=forward_args,
    ) as session:
        return session.run()


@click.command()
@click.argument('recipe', type=click.Path(dir_okay=False))
@click.option('--artifactdir', help='Directory for generated artifacts (default: cwd)')
@click.option('--internal-image', hidden=True, help='Image handle passed to the sandboxed run')
@click.option('-t', '--template-var', 'template_vars', multiple=True, callback=parse_template_vars,
              metavar='NAME:VALUE', help='Template variables')
@click.option('--disable-sandbox', is_flag=True, help='Always run directly on the host')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('-l', '--log-levels', help="Comma-separated per-module log levels (e.g., 'build=DEBUG,pre=INFO')")
@click.option('-f', '--log-file', help='Path to log file')
@click.version_option(version=__version__, prog_name='yaib')
@click.pass_context
def cli(ctx, recipe, artifactdir, internal_image, template_vars, disable_sandbox, debug, log_levels, log_file):
    """yaib - Build OS images from a recipe

    \b
    Examples:
      yaib recipe.yaml                          Build in a sandbox when possible
      yaib recipe.yaml -t release:bookworm      Set a template variable
      yaib recipe.yaml --disable-sandbox        Build directly on the host
    """
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    setup_logging(debug, log_levels, log_file)
    status = do_build(recipe, artifactdir, internal_image, template_vars, disable_sandbox, debug)
    ctx.exit(status)
