"""Read and rewrite the version field of a package's ``package.json``."""

from __future__ import annotations

import json
from pathlib import Path

from npmpush.core.result import Err, Ok, Result
from npmpush.core.structured import StrDict, as_str_dict, get_str
from npmpush.platform.files import atomic_write_text
from npmpush.services.publish.errors import ManifestReadError, ManifestWriteError
from npmpush.services.publish.model import MANIFEST_FILENAME, Package


def manifest_path(package_dir: Path) -> Path:
    return package_dir / MANIFEST_FILENAME


def _load_manifest(path: Path) -> Result[StrDict, ManifestReadError]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(ManifestReadError(path=path, reason="file not found"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ManifestReadError(path=path, reason=str(e)))

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(ManifestReadError(path=path, reason=f"invalid JSON: {e}"))

    data = as_str_dict(obj)
    if data is None:
        return Err(ManifestReadError(path=path, reason="JSON root must be an object"))
    return Ok(data)


def _version_of(path: Path, data: StrDict) -> Result[str, ManifestReadError]:
    # Taken verbatim: rollback must write back exactly what was there.
    value = data.get("version")
    if not isinstance(value, str):
        return Err(ManifestReadError(path=path, reason="missing version"))
    return Ok(value)


def read_version(package_dir: Path) -> Result[str, ManifestReadError]:
    path = manifest_path(package_dir)
    data = _load_manifest(path)
    if isinstance(data, Err):
        return data
    return _version_of(path, data.value)


def write_version(
    package_dir: Path, version: str
) -> Result[None, ManifestReadError | ManifestWriteError]:
    """Set ``version`` in the manifest, keeping every other key and its order.

    Output is two-space indented JSON with a trailing newline, the layout npm
    itself writes.
    """
    path = manifest_path(package_dir)
    data = _load_manifest(path)
    if isinstance(data, Err):
        return data

    manifest = data.value
    manifest["version"] = version

    try:
        atomic_write_text(path, json.dumps(manifest, indent=2, ensure_ascii=False) + "\n")
    except OSError as e:
        return Err(ManifestWriteError(path=path, reason=str(e)))
    return Ok(None)


def load_package(package_dir: Path) -> Result[Package, ManifestReadError]:
    path = manifest_path(package_dir)
    data = _load_manifest(path)
    if isinstance(data, Err):
        return data

    name = get_str(data.value, "name")
    if name is None:
        return Err(ManifestReadError(path=path, reason="missing name"))

    version = _version_of(path, data.value)
    if isinstance(version, Err):
        return version

    return Ok(Package(name=name, version=version.value, path=package_dir, manifest=data.value))
