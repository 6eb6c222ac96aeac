# tests/test_content_analysis.py
from post_scoring.services.content_analysis import ContentStructure, analyze_content


def test_counts_images_and_scored_headings():
    markup = (
        "<h1>Title</h1><h2>Intro</h2><p>text<img src='a.png'></p>"
        "<h3>Details</h3><IMG SRC='b.png'/><h4>ignored</h4>"
    )
    structure = analyze_content(markup)
    assert structure.image_count == 2
    assert structure.heading_count == 2


def test_detects_rich_blocks():
    structure = analyze_content(
        "<blockquote>q</blockquote><ol><li>a</li></ol><table><tr><td>1</td></tr></table>"
    )
    assert structure.has_blockquote
    assert structure.has_list
    assert structure.has_table


def test_plain_text_has_no_structure():
    assert analyze_content("just words, no tags") == ContentStructure()


def test_empty_or_missing_markup_yields_zero_structure():
    assert analyze_content("") == ContentStructure()
    assert analyze_content(None) == ContentStructure()


def test_malformed_markup_never_raises():
    structure = analyze_content("<h2>open <img src=x <ul><li>unterminated")
    assert isinstance(structure, ContentStructure)
