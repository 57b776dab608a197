"""Simplified tool loader."""

import json
import importlib
import inspect
import sys
from pathlib import Path
from typing import Any, Callable, Optional, Type
from functools import wraps
from pydantic import BaseModel


def _report(message: str) -> None:
    # stdout carries the MCP stdio transport
    print(message, file=sys.stderr)


class ToolManifest:
    """Handles manifest loading with sensible defaults."""

    DEFAULT_MANIFEST = {
        "name": "unnamed_tool",
        "description": "No description provided.",
        "tags": [],
    }

    def __init__(self, tool_dir: Path):
        self.manifest = self.DEFAULT_MANIFEST.copy()
        manifest_path = tool_dir / "manifest.json"

        if manifest_path.exists():
            try:
                with open(manifest_path, encoding="utf-8") as f:
                    file_manifest = json.load(f)
                self.manifest.update(file_manifest)
            except (PermissionError, json.JSONDecodeError) as e:
                _report(f"[WARNING] Could not read manifest.json: {e}")
        else:
            _report(f"[WARNING] No manifest.json found at {manifest_path}")

    def get(self, key: str, default=None):
        """Get a manifest value."""
        return self.manifest.get(key, default)

    @property
    def name(self) -> str:
        """Get the family or tool name from the manifest."""
        return self.manifest["name"]

    @property
    def description(self) -> str:
        return self.manifest["description"]

    @property
    def tags(self) -> list:
        """Get the tags from the manifest, returning empty list if not specified."""
        return self.manifest.get("tags", [])

    @property
    def tools(self) -> list[dict]:
        """
        Tool entries declared by the manifest.

        A family manifest lists its tools under "tools"; a single-tool manifest
        is treated as a family of one built from its own name, description and
        entry_function.
        """
        if "tools" in self.manifest:
            return self.manifest["tools"]
        return [
            {
                "name": self.name,
                "description": self.description,
                "entry_function": self.manifest.get("entry_function"),
                "output_model": self.manifest.get("output_model"),
            }
        ]


def create_simple_tool(
    manifest_path: Path,
    func: Callable[..., Any],
    output_schema: dict | Type[BaseModel] | None = None,
    name: Optional[str] = None,
    description: Optional[str] = None,
) -> Callable:
    """
    Factory function for creating simple tools without a class.

    Args:
        manifest_path: Path to the tool's directory (containing manifest.json)
        func: The function implementing the tool logic
        output_schema: Optional output schema (dict or Pydantic model class) for the tool
        name: Tool name, overriding the manifest's name (used for tool families)
        description: Tool description, overriding the manifest's description

    Returns:
        A register function compatible with the MCP loader

    Example:
        def is_today(params: IsTodayInput) -> dict:
            return {"success": True, "is_today": True}

        register = create_simple_tool(Path(__file__).parent, is_today)
    """
    manifest = ToolManifest(manifest_path)

    def register(mcp):
        @mcp.tool(
            name=name or manifest.name,
            description=description or manifest.description,
            output_schema=output_schema,
            tags=set(manifest.tags) if manifest.tags else None,
        )
        @wraps(func)
        async def wrapper(*args, **kwargs):
            return func(*args, **kwargs)

        # copy signature explicitly
        wrapper.__signature__ = inspect.signature(func)

        return wrapper

    return register


def resolve_output_schema(
    tool_folder: Path, package: str, tool_name: str, model_name: Optional[str] = None
) -> Optional[dict]:
    """
    Find the output schema for a tool.

    Prefers the named Pydantic model in output_model.py, then the first Pydantic
    model defined there, then an output.json file in the tool folder.

    Raises:
        AttributeError: If the manifest names a model output_model.py lacks.
    """
    try:
        output_module = importlib.import_module(f"{package}.output_model")
    except ImportError:
        output_module = None

    if output_module is not None:
        if model_name:
            model = getattr(output_module, model_name, None)
            if not (inspect.isclass(model) and issubclass(model, BaseModel)):
                raise AttributeError(f"output_model.py missing model '{model_name}'")
            _report(f"[INFO] Using Pydantic model {model_name} for {tool_name}")
            return model.model_json_schema()

        for attr_name in dir(output_module):
            attr = getattr(output_module, attr_name)
            if (
                inspect.isclass(attr)
                and issubclass(attr, BaseModel)
                and attr is not BaseModel
            ):
                _report(f"[INFO] Using Pydantic model {attr_name} for {tool_name}")
                return attr.model_json_schema()

    schema_path = tool_folder / "output.json"
    if schema_path.exists():
        try:
            with open(schema_path, encoding="utf-8") as f:
                output_schema = json.load(f)
            _report(f"[INFO] Using JSON schema for {tool_name}")
            return output_schema
        except (OSError, json.JSONDecodeError) as e:
            _report(f"[WARNING] Could not load output schema for {tool_name}: {e}")
    return None


def load_tools_from_directory(mcp, tools_dir="tools"):
    """Load all tool families from the tools directory."""
    tools_dir = Path(tools_dir)
    loaded = []
    failed = []

    for tool_folder in sorted(tools_dir.iterdir()):
        if not tool_folder.is_dir() or tool_folder.name.startswith((".", "__")):
            continue

        manifest_path = tool_folder / "manifest.json"
        if not manifest_path.exists():
            _report(f"[SKIP] {tool_folder.name}: No manifest.json")
            continue

        try:
            with open(manifest_path, encoding="utf-8") as f:
                manifest = json.load(f)
            if not manifest.get("name"):
                raise ValueError("manifest.json missing 'name' field")

            package = f"{tools_dir.name}.{tool_folder.name}"
            module = importlib.import_module(f"{package}.tool")
            entries = ToolManifest(tool_folder).tools
        except (FileNotFoundError, json.JSONDecodeError, ValueError, ImportError) as e:
            failed.append(tool_folder.name)
            _report(f"[FAIL] ✗ {tool_folder.name}: {e}")
            continue

        for entry in entries:
            tool_name = entry.get("name") or tool_folder.name
            try:
                if tool_name in loaded:
                    raise ValueError(f"duplicate tool name '{tool_name}'")
                tool_entry = entry.get("entry_function")
                if not tool_entry or not hasattr(module, tool_entry):
                    raise AttributeError(f"tool.py missing function '{tool_entry}'")
                tool_func = getattr(module, tool_entry)

                output_schema = resolve_output_schema(
                    tool_folder, package, tool_name, entry.get("output_model")
                )

                register_func = create_simple_tool(
                    tool_folder,
                    tool_func,
                    output_schema,
                    name=tool_name,
                    description=entry.get("description"),
                )
                register_func(mcp)

                loaded.append(tool_name)
                _report(f"[LOAD] ✓ {tool_name}")
            except (AttributeError, ValueError, ImportError, json.JSONDecodeError) as e:
                failed.append(tool_name)
                _report(f"[FAIL] ✗ {tool_name}: {e}")

    # Summary
    _report(f"\n{'='*50}")
    _report(f"Loaded: {len(loaded)} tools")
    if failed:
        _report(f"Failed: {len(failed)} tools: {', '.join(failed)}")
    _report(f"{'='*50}\n")

    return {"loaded": loaded, "failed": failed}
