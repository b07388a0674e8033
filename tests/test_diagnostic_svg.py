"""Tests for hitboxlib.diagnostic_svg module."""

# Standard Library
import os

# Third Party
import pytest

# Local
import conftest
conftest.add_repo_root_to_sys_path()

from hitboxlib.builder import build_spatial_index
from hitboxlib.diagnostic_svg import build_hitbox_overlay, build_hitbox_svg, cross_paths

import defusedxml.ElementTree as ET


#============================================
@pytest.fixture(scope="module")
def index():
	return build_spatial_index(conftest.fixture_text("two_system_page.svg")).index


#============================================
@pytest.fixture
def output_dir(request, tmp_path):
	if request.config.getoption("save"):
		return os.getcwd()
	return tmp_path


#============================================
def test_cross_paths_draw_both_diagonals():
	first, second = cross_paths((10, 20, 30, 40), "n1")
	assert first.get("d") == "M10 20 L40 60"
	assert second.get("d") == "M40 20 L10 60"
	assert first.get("data-id") == "n1"
	assert second.get("stroke") == "#00FF00"


#============================================
def test_overlay_group_class(index):
	group = build_hitbox_overlay(index)
	assert group.tag == "g"
	assert group.get("class") == "hitbox-elements"


#============================================
def test_overlay_has_one_path_per_marker_and_two_per_box(index):
	group = build_hitbox_overlay(index)
	paths = list(group)
	rows = [path for path in paths if path.get("stroke") == "#FF0000"]
	columns = [path for path in paths if path.get("stroke") == "#0000FF"]
	crosses = [path for path in paths if path.get("stroke") == "#00FF00"]
	assert len(rows) == len(index.row_markers)
	assert len(columns) == sum(len(markers) for markers in index.column_markers)
	# 15 leaf hitboxes and 3 floating rects
	assert len(crosses) == 2 * 18
	assert rows[0].get("d") == "M0 600 L20000 600"
	assert rows[0].get("stroke-width") == "22"
	assert columns[0].get("d") == "M1500 600 L1500 2500"


#============================================
def test_overlay_tags_floating_rects(index):
	group = build_hitbox_overlay(index)
	tagged = {path.get("data-id") for path in group if path.get("data-id")}
	assert {"tie:t1", "hairpin:h1", "dynam:d1", "n1", "a1", "ms1"} <= tagged


#============================================
def test_overlay_markup_parses(index, output_dir):
	markup = build_hitbox_svg(index)
	root = ET.fromstring(markup)
	assert root.get("class") == "hitbox-elements"
	page = (
		"<svg xmlns='http://www.w3.org/2000/svg' viewBox='0 0 20000 10000'>"
		f"{markup}</svg>"
	)
	output_path = os.path.join(str(output_dir), "hitbox_overlay.svg")
	with open(output_path, "w", encoding="utf-8") as handle:
		handle.write(page)
	assert os.path.isfile(output_path)
