from ..abstractions import Action
from ..datacls import BuildContext
from ..exceptions import ActionDefinitionError
from ..io import copy_tree


class OverlayAction(Action):
    """Copy a directory from the recipe directory over the root filesystem."""
    source: str
    destination: str = "/"

    def verify(self, context: BuildContext) -> None:
        if not (context.recipe_dir / self.source).is_dir():
            raise ActionDefinitionError(f"Overlay source '{context.recipe_dir / self.source}' is not a directory")

    def run(self, context: BuildContext) -> None:
        target = context.rootdir / self.destination.lstrip("/")
        target.parent.mkdir(parents=True, exist_ok=True)
        copy_tree(context.recipe_dir / self.source, target)
