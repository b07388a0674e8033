"""Tests for hitboxlib.builder module against a two-system page."""

# Standard Library
import logging

# Third Party
import pytest

# Local
import conftest
conftest.add_repo_root_to_sys_path()

from hitboxlib.builder import (
	StructureError,
	build_spatial_index,
	page_offset,
	parse_document,
)
from hitboxlib.config import HitboxConfig
from hitboxlib.util import strictly_increasing


PAGE_FILE = "two_system_page.svg"


#============================================
@pytest.fixture(scope="module")
def page_text():
	return conftest.fixture_text(PAGE_FILE)


#============================================
@pytest.fixture(scope="module")
def index(page_text):
	result = build_spatial_index(page_text)
	assert result.ok, result.error
	return result.index


#============================================
def test_row_markers_one_band_per_staff(index):
	assert index.row_markers == (600, 2500, 4600, 6100, 7140)
	assert index.row_count == 4


#============================================
def test_first_row_columns(index):
	assert index.column_markers[0] == (1500, 2230, 2620, 3400, 4900, 5950, 6950, 8150, 9500, 15500, 20000)
	labels = [cell.label for cell in index.cells[0]]
	assert labels == ["c1", "ka1", "ms1", "a1/n1", "n2", "n3", "n4/n5", "r1", "n6", ""]


#============================================
def test_empty_staff_keeps_one_cell_per_measure(index):
	assert index.column_markers[1] == (1500, 9500, 15500, 20000)
	assert [cell.label for cell in index.cells[1]] == ["mr1", "", ""]


#============================================
def test_second_system_rows(index):
	assert index.column_markers[2] == (1500, 18500, 20000)
	assert [cell.label for cell in index.cells[2]] == ["n7", ""]
	assert [cell.label for cell in index.cells[3]] == ["r2", ""]


#============================================
def test_grid_invariants(index):
	assert strictly_increasing(index.row_markers)
	assert len(index.row_markers) == index.row_count + 1
	for markers, cells in zip(index.column_markers, index.cells):
		assert strictly_increasing(markers)
		assert len(markers) == len(cells) + 1


#============================================
def test_hitboxes_stay_inside_their_row_band(index):
	for row, cells in enumerate(index.cells):
		top = index.row_markers[row]
		bottom = index.row_markers[row + 1]
		for cell in cells:
			for hitbox in cell.hitboxes:
				assert top <= hitbox.y
				assert hitbox.bottom <= bottom


#============================================
def test_note_and_accidental_share_a_cell(index):
	cell = index.cells[0][3]
	accid, note = cell.hitboxes
	assert (note.x, note.width) == (4000, 300)
	assert accid.right == note.x + 1
	assert cell.element_ids == ("a1", "n1")
	assert index.id_table[accid.group_id] == "n1"


#============================================
def test_group_ids_from_containers(index):
	chord_cell = index.cells[0][6]
	assert {index.id_table[hitbox.group_id] for hitbox in chord_cell.hitboxes} == {"ch1"}
	key_cell = index.cells[0][1]
	assert index.id_table[key_cell.hitboxes[0].group_id] == "ks1"
	assert (key_cell.hitboxes[0].x, key_cell.hitboxes[0].width) == (2260, 280)


#============================================
def test_ignored_and_id_less_elements_not_in_id_table(index):
	assert "stm-n1" not in index.id_table
	assert "l1" not in index.id_table
	assert "b1" not in index.id_table
	assert "a1-empty" not in index.id_table
	assert len(index.id_table) == 16


#============================================
def test_floating_rects(index):
	rects = {rect.description: rect for rect in index.floating_rects}
	assert sorted(rects) == ["dynam:d1", "hairpin:h1", "tie:t1"]
	assert rects["tie:t1"].box == (4800, 2200, 400, 50)
	assert (rects["tie:t1"].min_row, rects["tie:t1"].max_row) == (0, 0)
	assert rects["hairpin:h1"].box == (3500, 2700, 1500, 200)
	assert (rects["hairpin:h1"].min_row, rects["hairpin:h1"].max_row) == (1, 1)
	assert rects["dynam:d1"].box == (6500, 2600, 500, 400)


#============================================
@pytest.mark.parametrize("x, y, expected", [
	(4100, 1700, "n1"),
	(3800, 1700, "a1"),
	(2800, 1600, "ms1"),
	(2800, 1800, "ms1"),
	(2270, 1500, "ka1"),
	(1700, 1300, "c1"),
	(7600, 1400, "n5"),
	(7600, 1700, "n4"),
	(5600, 3300, "mr1"),
	(3600, 5700, "n7"),
	(4900, 2220, "tie:t1"),
	(4000, 2800, "hairpin:h1"),
	(6700, 2800, "dynam:d1"),
	(12000, 1700, ""),
	(100, 100, ""),
	(3600, 9000, ""),
])
def test_element_at(index, x, y, expected):
	assert index.element_at(x, y) == expected


#============================================
def test_group_queries(index):
	assert index.group_id_at(3800, 1700) == "a1/n1"
	assert index.children_at(3800, 1700) == ["a1", "n1"]
	assert index.group_bounds(3800, 1700) == (3400, 600, 1500, 1900)
	assert index.group_id_at(12000, 3000) == ""
	assert index.group_bounds(12000, 3000) == (9500, 2500, 6000, 2100)
	assert index.children_at(2800, 1600) == ["ms1", "ms1"]


#============================================
def test_point_inside_every_leaf_resolves_to_it(index):
	for row_cells in index.cells:
		for cell in row_cells:
			for hitbox, element_id in zip(cell.hitboxes, cell.element_ids):
				x = hitbox.x + hitbox.width // 2
				y = hitbox.y + hitbox.height // 2
				if any(rect.x < x < rect.x + rect.width and rect.y < y < rect.y + rect.height for rect in index.floating_rects):
					continue
				found = index.element_at(x, y)
				# overlapping siblings in one cell resolve to the earlier box
				assert found == element_id or found in cell.element_ids


#============================================
def test_rebuild_is_identical(page_text, index):
	again = build_spatial_index(page_text).index
	assert again == index


#============================================
def test_inner_definition_scale_svg_is_supported(page_text):
	wrapped = page_text.replace(
		"<g class=\"page-margin\"",
		"<svg class=\"definition-scale\" viewBox=\"0 0 20000 10000\"><g class=\"page-margin\"",
	).replace("</g>\n</svg>", "</g>\n</svg></svg>")
	result = build_spatial_index(wrapped)
	assert result.ok, result.error
	assert result.index.row_markers == (600, 2500, 4600, 6100, 7140)


#============================================
def test_custom_config_changes_closing_row(page_text):
	result = build_spatial_index(page_text, HitboxConfig(lowest_staff_margin=100))
	assert result.index.row_markers[-1] == 7200


#============================================
@pytest.mark.parametrize("mutate, message", [
	(lambda text: text.replace("class=\"page-margin\"", "class=\"not-margin\""), "page margin"),
	(lambda text: text.replace(" viewBox=\"0 0 20000 10000\"", ""), "viewBox"),
	(lambda text: text.replace("translate(500, 500)", "rotate(90)"), "translate"),
	(lambda text: text.replace("class=\"system\"", "class=\"sys\""), "no system"),
	(lambda text: "<svg", "readable"),
	(lambda text: "<html/>", "not <svg>"),
])
def test_structure_errors_abort_with_result(page_text, mutate, message, caplog):
	with caplog.at_level(logging.ERROR, logger="hitboxlib.builder"):
		result = build_spatial_index(mutate(page_text))
	assert not result.ok
	assert result.index is None
	assert message in result.error
	assert "hitbox build aborted" in caplog.text


#============================================
def test_unknown_glyph_does_not_abort(page_text):
	broken = page_text.replace("#E4E5-qr\" x=\"8000\"", "#NOPE\" x=\"8000\"")
	result = build_spatial_index(broken)
	assert result.ok
	labels = [cell.label for cell in result.index.cells[0]]
	assert "r1" not in labels
	assert result.index.element_at(8600, 1700) == ""


#============================================
def test_unknown_accidental_glyph_stays_local(page_text):
	broken = page_text.replace("#E262-sh\" x=\"3200\"", "#NOPE\" x=\"3200\"")
	index = build_spatial_index(broken).index
	assert index.row_markers == (600, 2500, 4600, 6100, 7140)
	labels = [cell.label for cell in index.cells[0]]
	assert labels[:5] == ["c1", "ka1", "ms1", "n1", "n2"]
	assert index.column_markers[0][:5] == (1500, 2230, 2620, 3550, 4900)
	assert "a1" not in index.id_table
	assert index.element_at(4100, 1700) == "n1"


#============================================
def test_unknown_notehead_glyph_keeps_accidental_box(page_text):
	broken = page_text.replace("#E0A4-nh\" x=\"3500\"", "#NOPE\" x=\"3500\"")
	index = build_spatial_index(broken).index
	assert index.row_markers == (600, 2500, 4600, 6100, 7140)
	accid_cell = index.cells[0][3]
	assert accid_cell.label == "a1"
	assert accid_cell.hitboxes[0].box == (3700, 1400, 200, 600)
	assert index.column_markers[0][3:5] == (3400, 4700)
	assert index.element_at(3800, 1700) == "a1"
	assert index.element_at(4100, 1700) == ""


#============================================
def test_unknown_key_accidental_glyph_stays_local(page_text):
	broken = page_text.replace("#E262-sh\" x=\"1800\"", "#NOPE\" x=\"1800\"")
	index = build_spatial_index(broken).index
	assert index.row_markers == (600, 2500, 4600, 6100, 7140)
	assert [cell.label for cell in index.cells[0]][:3] == ["c1", "ms1", "a1/n1"]
	assert index.column_markers[0][:3] == (1500, 2450, 3400)


#============================================
def test_dynamic_below_last_staff_keeps_its_last_row(page_text):
	moved = page_text.replace("#E522-df\" x=\"6000\" y=\"2300\"", "#E522-df\" x=\"6000\" y=\"6500\"")
	index = build_spatial_index(moved).index
	rects = {rect.description: rect for rect in index.floating_rects}
	dynam = rects["dynam:d1"]
	assert dynam.box == (6500, 6800, 500, 400)
	assert (dynam.min_row, dynam.max_row) == (3, 3)
	assert index.element_at(6700, 7000) == "dynam:d1"


#============================================
def test_page_offset_defaults_to_origin():
	root = parse_document("<svg xmlns='http://www.w3.org/2000/svg'><g class='page-margin'/></svg>")
	assert page_offset(root[0]) == (0, 0)


#============================================
def test_parse_document_rejects_entities():
	with pytest.raises(StructureError):
		parse_document("<!DOCTYPE svg [<!ENTITY x 'y'>]><svg>&x;</svg>")
