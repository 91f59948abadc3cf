"""Unit tests for stratum tree normalization."""

from __future__ import annotations

from ingest.tree_normalizer import normalize_tree


def _names(path) -> list[str]:
    return sorted(entry.name for entry in path.iterdir())


def test_named_wrapper_is_collapsed(tmp_path) -> None:
    """Contents of the named wrapper directory should move to the top level."""
    (tmp_path / "0" / "etc").mkdir(parents=True)
    (tmp_path / "0" / "usr").mkdir()
    (tmp_path / "stratum-import").mkdir()

    collapsed = normalize_tree(tmp_path, "0")

    assert collapsed is not None and _names(tmp_path) == ["etc", "stratum-import", "usr"]


def test_single_top_level_directory_is_collapsed(tmp_path) -> None:
    """A lone wrapping directory should be hoisted."""
    (tmp_path / "rootfs" / "etc").mkdir(parents=True)
    (tmp_path / "rootfs" / "etc" / "os-release").write_text("ID=arch\n", encoding="utf-8")

    normalize_tree(tmp_path, "0")

    assert (tmp_path / "etc" / "os-release").read_text(encoding="utf-8") == "ID=arch\n"


def test_child_named_like_wrapper_survives_collapse(tmp_path) -> None:
    """A wrapper child sharing the wrapper name should land intact."""
    (tmp_path / "root" / "root" / ".bashrc").parent.mkdir(parents=True)
    (tmp_path / "root" / "root" / ".bashrc").write_text("", encoding="utf-8")
    (tmp_path / "root" / "etc").mkdir()

    normalize_tree(tmp_path, "0")

    assert _names(tmp_path) == ["etc", "root"] and (tmp_path / "root" / ".bashrc").exists()


def test_normal_tree_is_untouched(tmp_path) -> None:
    """Trees with several top-level entries should be left alone."""
    for name in ("bin", "etc", "usr"):
        (tmp_path / name).mkdir()

    collapsed = normalize_tree(tmp_path, "0")

    assert collapsed is None and _names(tmp_path) == ["bin", "etc", "usr"]


def test_normalization_is_idempotent(tmp_path) -> None:
    """A second pass over a normalized tree should change nothing."""
    (tmp_path / "0" / "etc").mkdir(parents=True)
    (tmp_path / "0" / "var").mkdir()

    normalize_tree(tmp_path, "0")
    second = normalize_tree(tmp_path, "0")

    assert second is None and _names(tmp_path) == ["etc", "var"]


def test_empty_named_wrapper_is_not_collapsed(tmp_path) -> None:
    """An empty directory named like the wrapper should be kept."""
    (tmp_path / "0").mkdir()
    (tmp_path / "etc").mkdir()

    assert normalize_tree(tmp_path, "0") is None and _names(tmp_path) == ["0", "etc"]


def test_symlinked_single_entry_is_not_followed(tmp_path) -> None:
    """A lone symlink to a directory should not be treated as a wrapper."""
    target = tmp_path / "target"
    (target / "etc").mkdir(parents=True)
    stratum = tmp_path / "stratum"
    stratum.mkdir()
    (stratum / "rootfs").symlink_to(target)

    assert normalize_tree(stratum, "0") is None and (stratum / "rootfs").is_symlink()
