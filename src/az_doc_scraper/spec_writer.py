import os
import json
import logging

from .config import TOOL_NAME
from .errors import PreconditionFailure
from .models import CommandNode

logger = logging.getLogger(__name__)

ROOT_TEMPLATE = """const completion: Fig.Spec = {spec}

const versions: Fig.VersionDiffMap = {versions};

export {{ versions }};
export default completion;
"""

SUBCOMMAND_TEMPLATE = """const completion: Fig.Spec = {spec}

export default completion;
"""


def load_spec_ref(version: str, name: str) -> str:
    return f"{TOOL_NAME}/{version}/{name}"


class SpecWriter:
    """Writes completion specs as TypeScript modules under ``<output_root>/az``.

    Layout::

        <output_root>/az/<version>.ts          root spec, doubles as version marker
        <output_root>/az/<version>/<name>.ts   one spec per base command
    """

    def __init__(self, output_root: str):
        self.output_root = output_root
        self.spec_dir = os.path.join(output_root, TOOL_NAME)

    def check_output_root(self) -> None:
        if not os.path.isdir(self.output_root):
            raise PreconditionFailure(
                f"Output root {self.output_root!r} does not exist; "
                "run from the root of the completion-spec repository"
            )

    def root_spec_path(self, version: str) -> str:
        return os.path.join(self.spec_dir, f"{version}.ts")

    def subcommand_path(self, version: str, name: str) -> str:
        return os.path.join(self.spec_dir, version, f"{name}.ts")

    def is_up_to_date(self, version: str) -> bool:
        return os.path.exists(self.root_spec_path(version))

    def _write(self, path: str, content: str) -> None:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        logger.info(f"Spec saved to: {path}")

    def write_subcommand(self, command: CommandNode, version: str) -> str:
        path = self.subcommand_path(version, command.name)
        spec = json.dumps(command.to_dict(), ensure_ascii=False)
        self._write(path, SUBCOMMAND_TEMPLATE.format(spec=spec))
        return path

    def write_root(self, root: CommandNode, version: str) -> str:
        path = self.root_spec_path(version)
        spec = json.dumps(root.to_dict(), ensure_ascii=False)
        versions = json.dumps({version: {}})
        self._write(path, ROOT_TEMPLATE.format(spec=spec, versions=versions))
        return path
