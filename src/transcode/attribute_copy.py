"""Attribute replication between corresponding container objects."""

from __future__ import annotations

import h5py

from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def copy_attributes(source: h5py.File, object_path: str, destination: h5py.File) -> int:
    """Copy every attribute of one source object onto its destination twin.

    Each attribute keeps its name, element type, and shape. A failing
    attribute is logged and skipped so the remaining ones still copy.

    Args:
        source: Open source container.
        object_path: Absolute path shared by both objects.
        destination: Open destination container.

    Returns:
        Number of attributes copied.
    """
    source_object = _open_object(source, object_path)
    destination_object = _open_object(destination, object_path)
    if source_object is None or destination_object is None:
        _LOGGER.warning(
            "attribute_copy_failed",
            path=object_path,
            reason="object could not be opened",
            source_found=source_object is not None,
            destination_found=destination_object is not None,
        )
        return 0
    copied_count = 0
    for attribute_name in source_object.attrs:
        try:
            _copy_one_attribute(source_object, destination_object, attribute_name)
        except (KeyError, OSError, RuntimeError, TypeError, ValueError) as error:
            _LOGGER.warning(
                "attribute_copy_failed",
                path=object_path,
                attribute=attribute_name,
                reason=str(error),
            )
            continue
        copied_count += 1
    return copied_count


def _open_object(container: h5py.File, object_path: str) -> h5py.HLObject | None:
    try:
        return container.get(object_path)
    except (KeyError, OSError, RuntimeError):
        return None


def _copy_one_attribute(
    source_object: h5py.HLObject,
    destination_object: h5py.HLObject,
    attribute_name: str,
) -> None:
    """Recreate one attribute with the source's stored type and shape."""
    attribute_id = source_object.attrs.get_id(attribute_name)
    value = source_object.attrs[attribute_name]
    if isinstance(value, h5py.Empty):
        destination_object.attrs.create(attribute_name, value)
        return
    destination_object.attrs.create(
        attribute_name,
        value,
        shape=attribute_id.shape,
        dtype=attribute_id.dtype,
    )
