import pytest

from thumbforge.errors import InvalidTargetError, UnknownTargetError
from thumbforge.models import (
    PRESET_TARGETS,
    CopyTarget,
    Operation,
    ThumbnailTarget,
    parse_target_option,
    resolve_target,
    validate_local_name,
)


def test_presets_match_builtin_sizes() -> None:
    assert PRESET_TARGETS["orig"] == CopyTarget(name="orig")
    assert PRESET_TARGETS["sm"] == ThumbnailTarget(name="sm", width=150, height=150)
    assert PRESET_TARGETS["xs"] == ThumbnailTarget(name="xs", width=50, height=50)


def test_resolve_target_accepts_instances_presets_and_mappings() -> None:
    copy = CopyTarget(name="full")
    assert resolve_target(copy) is copy
    assert resolve_target("sm") == ThumbnailTarget(name="sm", width=150, height=150)
    assert resolve_target({"name": "md", "operation": "thumbnail", "width": 300, "height": 200}) == ThumbnailTarget(
        name="md", width=300, height=200
    )
    assert resolve_target({"name": "raw", "operation": Operation.COPY}) == CopyTarget(name="raw")


def test_resolve_target_rejects_unknown_operation_and_preset() -> None:
    with pytest.raises(UnknownTargetError, match="blur"):
        resolve_target({"name": "soft", "operation": "blur"})

    with pytest.raises(UnknownTargetError, match="huge"):
        resolve_target("huge")

    with pytest.raises(UnknownTargetError):
        resolve_target(42)


def test_resolve_target_rejects_invalid_dimensions() -> None:
    with pytest.raises(InvalidTargetError):
        resolve_target({"name": "bad", "operation": "thumbnail", "width": 0, "height": 10})

    with pytest.raises(InvalidTargetError):
        resolve_target({"name": "../escape", "operation": "copy"})


def test_parse_target_option_syntax() -> None:
    assert parse_target_option("orig") == CopyTarget(name="orig")
    assert parse_target_option("full=copy") == CopyTarget(name="full")
    assert parse_target_option("wide=640x360") == ThumbnailTarget(name="wide", width=640, height=360)

    with pytest.raises(UnknownTargetError):
        parse_target_option("wide=640by360")


def test_validate_local_name() -> None:
    assert validate_local_name("owl-1705112_960") == "owl-1705112_960"
    assert validate_local_name("owl.v2") == "owl.v2"

    for bad in ["../owl", "a/b", ".owl", "", "owl\n"]:
        with pytest.raises(ValueError):
            validate_local_name(bad)
