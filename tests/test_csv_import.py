import json

import pytest

from provisioner.models import CarouselContent, CarouselSlide, Placeholder, TaskValue
from provisioner.services import ColumnMismatchError, CsvImporter, CsvImportError, DraftTaskStore
from provisioner.services.csv_import import carousel_defaults, import_csv, read_csv
from provisioner.template import parse_nodes


def test_name_age_rows(two_slot_placeholders):
    rows = read_csv("Name,Age\nAlice,30\nBob,25\n")

    tasks = import_csv(rows, two_slot_placeholders)

    assert len(tasks) == 2
    assert tasks[0].values == [TaskValue("Alice"), TaskValue("30")]
    assert tasks[1].values == [TaskValue("Bob"), TaskValue("25")]
    assert all(v.file_type == "document" for t in tasks for v in t.values)


def test_column_mismatch_names_both_sides(two_slot_placeholders):
    rows = read_csv("Name,Age,City\nAlice,30,Paris\n")

    with pytest.raises(ColumnMismatchError) as exc_info:
        import_csv(rows, two_slot_placeholders)

    err = exc_info.value
    assert err.header_count == 3
    assert err.placeholder_count == 2
    assert err.headers == ["Name", "Age", "City"]
    assert err.placeholder_names == ["Name", "Age"]
    assert "3 columns" in str(err) and "2 placeholders" in str(err)


def test_mismatch_leaves_store_unchanged(two_slot_placeholders):
    store = DraftTaskStore(2)
    seeded = store.add_task()
    store.set_value(seeded.id, 0, "kept")
    importer = CsvImporter(store, two_slot_placeholders)

    with pytest.raises(ColumnMismatchError):
        importer.import_source("A,B,C\n1,2,3\n")

    assert store.tasks == [seeded]
    assert store.get(seeded.id).values[0] == TaskValue("kept")


def test_importer_replaces_drafts(two_slot_placeholders):
    store = DraftTaskStore(2)
    store.add_task()
    importer = CsvImporter(store, two_slot_placeholders)

    tasks = importer.import_source(b"\xef\xbb\xbfName,Age\nAlice,30\n")

    assert [t.id for t in store.tasks] == [2]
    assert tasks[0].values[0] == TaskValue("Alice")


def test_blank_rows_skipped_and_short_rows_padded(two_slot_placeholders):
    rows = [["Name", "Age"], ["", "  "], ["Carol"], []]

    tasks = import_csv(rows, two_slot_placeholders)

    assert len(tasks) == 1
    assert tasks[0].values == [TaskValue("Carol"), TaskValue("")]


def test_quoted_cells_with_commas(two_slot_placeholders):
    tasks = import_csv(read_csv('Name,Age\n"Smith, Jane",41\n'), two_slot_placeholders)
    assert tasks[0].values[0].content == "Smith, Jane"


def test_header_only_file_yields_no_tasks(two_slot_placeholders):
    assert import_csv(read_csv("Name,Age\n"), two_slot_placeholders) == []


def test_empty_file_is_a_mismatch(two_slot_placeholders):
    with pytest.raises(ColumnMismatchError):
        import_csv(read_csv(""), two_slot_placeholders)


def test_undecodable_bytes():
    with pytest.raises(CsvImportError):
        read_csv(b"Name\n\xff\xfe\x00bad")


class TestCarouselCells:
    @pytest.fixture()
    def placeholders(self):
        return [Placeholder(type="text", index=0, name="Caption"), Placeholder(type="carousel", index=1, name="Gallery")]

    @pytest.fixture()
    def fallback(self):
        return {"Gallery": CarouselContent(slides=(CarouselSlide("image", "", ""),), auto_slide=True)}

    def test_json_cell_is_parsed_and_normalized(self, placeholders, fallback):
        cell = json.dumps({"slides": [{"innerText": "one"}, {"type": "image", "src": "b.png"}], "slideInterval": 3})
        rows = [["Caption", "Gallery"], ["hi", cell]]

        value = import_csv(rows, placeholders, fallback)[0].values[1]

        assert value.slides == (
            CarouselSlide(type="text", src="", inner_text="one"),
            CarouselSlide(type="image", src="b.png", inner_text=""),
        )
        assert value.slide_interval == 3

    def test_invalid_json_uses_blanked_template_carousel(self, placeholders, fallback):
        rows = [["Caption", "Gallery"], ["hi", "not json"]]

        value = import_csv(rows, placeholders, fallback)[0].values[1]

        assert value == fallback["Gallery"]

    def test_carousel_defaults_blank_template_slides(self, loaded):
        template, _ = loaded

        defaults = carousel_defaults(template.nodes)

        assert defaults["Gallery"].slides == (
            CarouselSlide(type="image", src="", inner_text=""),
            CarouselSlide(type="text", src="", inner_text=""),
        )
        assert defaults["Gallery"].auto_slide is True

    def test_defaults_found_inside_containers(self):
        nodes = parse_nodes([
            {"type": "section", "content": [
                {"type": "dynamicCarousel", "name": "Nested", "content": {"slides": "broken"}},
            ]},
        ])

        assert carousel_defaults(nodes) == {"Nested": CarouselContent()}
