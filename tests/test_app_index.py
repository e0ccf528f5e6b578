import logging

import pytest

from defapps.core.app_index import ApplicationIndex, MultiMap
from tests.conftest import desktop_text


def test_multimap_deduplicates():
    mm = MultiMap()
    assert mm.add("text", "gedit")
    assert not mm.add("text", "gedit")
    mm.add("text", "kate")
    mm.add("image", "gimp")
    assert mm.values("text") == ["gedit", "kate"]
    assert mm.contains("image", "gimp")
    assert not mm.contains("image", "gedit")
    assert "text" in mm
    assert len(mm) == 3
    assert mm.all_values() == {"gedit", "kate", "gimp"}
    assert mm.values("missing") == []


def test_ingest_groups_by_category(make_record):
    index = ApplicationIndex()
    index.ingest(make_record("b.desktop", filename="b.desktop", name="Viewer",
                             mimetypes=["image/png", "image/jpeg"]))
    index.ingest(make_record("gedit", mimetypes=["text/plain", "image/png"]))

    assert index.categories() == ["image", "text"]
    assert index.applications_in("image") == {"b.desktop", "gedit"}
    assert index.applications_in("text") == {"gedit"}
    assert index.applications_in("audio") == set()
    assert index.mimetypes_for("b.desktop") == ["image/jpeg", "image/png"]
    assert index.mimetypes_claimed_by("gedit", "text") == ["text/plain"]
    assert index.mimetypes_claimed_by("gedit") == ["image/png", "text/plain"]
    assert index.all_mimetypes() == ["image/jpeg", "image/png", "text/plain"]


def test_ingest_twice_is_idempotent(make_record):
    record = make_record("gimp", mimetypes=["image/png", "image/jpeg"])
    once = ApplicationIndex()
    once.ingest(record)
    twice = ApplicationIndex()
    twice.ingest(record)
    twice.ingest(record)
    assert twice.mimetypes_for("gimp") == once.mimetypes_for("gimp")
    assert twice.applications_in("image") == once.applications_in("image")


@pytest.mark.parametrize("visible_first", [True, False])
def test_visible_record_takes_precedence(make_record, visible_first):
    visible = make_record("firefox", filename="firefox.desktop", name="Firefox",
                          icon="firefox", mimetypes=["text/html"])
    hidden = make_record("firefox", filename="firefox-private.desktop", name="Private",
                         icon="private", hidden=True, mimetypes=["application/pdf"])
    index = ApplicationIndex()
    for record in ((visible, hidden) if visible_first else (hidden, visible)):
        index.ingest(record)

    assert index.desktop_file_for("firefox") == "firefox.desktop"
    meta = index.metadata_for("firefox")
    assert meta.display_name == "Firefox"
    assert meta.icon == "firefox"
    # Types accumulate regardless of visibility
    assert index.mimetypes_for("firefox") == ["application/pdf", "text/html"]


def test_latest_hidden_record_used_without_visible_one(make_record):
    index = ApplicationIndex()
    index.ingest(make_record("tool", filename="one.desktop", name="One", hidden=True))
    index.ingest(make_record("tool", filename="two.desktop", name="Two", hidden=True))
    assert index.desktop_file_for("tool") == "two.desktop"
    assert index.metadata_for("tool").display_name == "Two"


def test_record_without_icon_keeps_existing_metadata(make_record):
    index = ApplicationIndex()
    index.ingest(make_record("tool", name="With Icon", icon="tool"))
    index.ingest(make_record("tool", name="No Icon", icon=""))
    meta = index.metadata_for("tool")
    assert meta.display_name == "With Icon"
    assert meta.icon == "tool"


def test_visible_record_without_icon_beats_later_hidden(make_record):
    index = ApplicationIndex()
    index.ingest(make_record("tool", filename="tool.desktop", name="Tool", icon=""))
    index.ingest(make_record("tool", filename="helper.desktop", name="Helper",
                             icon="helper", hidden=True))
    assert index.desktop_file_for("tool") == "tool.desktop"
    assert index.metadata_for("tool").display_name == "Tool"


def test_visible_record_without_icon_keeps_hidden_metadata(make_record):
    index = ApplicationIndex()
    index.ingest(make_record("tool", filename="helper.desktop", name="Helper",
                             icon="helper", hidden=True))
    index.ingest(make_record("tool", filename="tool.desktop", name="Tool", icon=""))
    assert index.desktop_file_for("tool") == "tool.desktop"
    meta = index.metadata_for("tool")
    assert meta.display_name == "Helper"
    assert meta.icon == "helper"


def test_metadata_for_unknown_identity():
    meta = ApplicationIndex().metadata_for("ghost")
    assert meta.display_name == "ghost"
    assert meta.icon == ""
    assert ApplicationIndex().desktop_file_for("ghost") is None


def test_sorted_applications_in_orders_by_display_name(make_record):
    index = ApplicationIndex()
    index.ingest(make_record("zzz", name="Alpha"))
    index.ingest(make_record("aaa", name="Omega"))
    index.ingest(make_record("mmm", name="Alpha"))
    assert index.sorted_applications_in("text") == ["mmm", "zzz", "aaa"]


def test_report_orphans_none_when_every_app_has_a_file(make_record, caplog):
    index = ApplicationIndex()
    index.ingest(make_record("tool"))
    with caplog.at_level(logging.WARNING, logger="defapps"):
        assert index.report_orphans() == []
    assert "does not have an associated desktop file" not in caplog.text


def test_scan_directories(tmp_path, resolver):
    apps = tmp_path / "applications"
    apps.mkdir()
    (apps / "a.desktop").write_text(desktop_text(
        "Name=Real", "Icon=real", "Exec=env FOO=1 /usr/bin/real-app", "MimeType=text/plain;",
    ))
    (apps / "b.desktop").write_text(desktop_text(
        "Name=Viewer", "MimeType=image/png;image/jpeg;",
    ))
    (apps / "settings.desktop").write_text(desktop_text("Name=Settings", "Exec=settings"))

    index = ApplicationIndex.scan([apps, tmp_path / "missing"], resolver)

    assert index.identities() == ["b.desktop", "real-app"]
    assert index.categories() == ["image", "text"]
    assert index.applications_in("image") == {"b.desktop"}
    assert index.mimetypes_for("b.desktop") == ["image/jpeg", "image/png"]
    assert index.desktop_file_for("real-app") == "a.desktop"
    assert index.metadata_for("real-app").display_name == "Real"
