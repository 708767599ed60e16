class YaibError(Exception):
    """Base exception for all application-specific errors."""

    pass


# --- 1. Errors related to loading, templating and decoding the recipe ---
class ConfigurationError(YaibError):
    """Base class for errors encountered while finding, rendering, or parsing a recipe."""

    pass


class RecipeFileMissingError(ConfigurationError):
    """Raised when the recipe file cannot be found."""

    pass


class TemplateError(ConfigurationError):
    """Raised when the recipe template cannot be rendered."""

    pass


class RecipeParsingError(ConfigurationError):
    """Raised when the rendered recipe is not a syntactically valid YAML mapping."""

    pass


class RecipeValidationError(ConfigurationError):
    """Raised when the recipe fails structural validation (e.g., Pydantic)."""

    pass


class UnknownActionError(ConfigurationError):
    """Raised when an action entry carries a tag no action kind is registered for."""

    pass


# --- 2. Errors related to the logical validity of actions ---
class DefinitionError(YaibError):
    """Base class for errors in the logical definition of a recipe."""

    pass


class ActionDefinitionError(DefinitionError):
    """Raised by an action's verify phase when its configuration or preconditions are invalid."""

    pass


class ActionVerifyError(DefinitionError):
    """Raised when an action fails its verify phase. Names the action and the phase like ActionError."""

    def __init__(self, action, phase, cause: BaseException):
        self.action = action
        self.phase = phase
        self.cause = cause
        super().__init__(f"Action `{action}` failed at stage {phase}, error: {cause}")


# --- 3. Errors that occur while the pipeline is executing ---
class BuildError(YaibError):
    """Base class for errors that occur while building the image."""

    pass


class ActionError(BuildError):
    """Raised when an action fails in one of its lifecycle phases."""

    def __init__(self, action, phase, cause: BaseException):
        self.action = action
        self.phase = phase
        self.cause = cause
        super().__init__(f"Action `{action}` failed at stage {phase}, error: {cause}")


class CommandError(BuildError):
    """Raised when an external command exits with a non-zero status or cannot be started."""

    pass


class TreeCopyError(BuildError):
    """Raised when a file tree contains an entry that cannot be materialized."""

    pass


class SandboxError(BuildError):
    """Raised when the sandbox machine cannot be prepared or started."""

    pass
