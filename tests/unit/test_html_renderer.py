"""Tests for deck rendering and slide counting."""

from bs4 import BeautifulSoup

from proposal_maker.core.defaults import DEFAULT_CSS_VARIABLES
from proposal_maker.domain.slide_deck import Deck, Slide
from proposal_maker.services.html_renderer import count_slides, render_presentation, sanitize_css


def sample_deck() -> Deck:
    return Deck(
        title="Q1 Update",
        slides=[
            Slide(id="1", title="Revenue", content="Grew 20%", type="content"),
            Slide(id="2", title="Plan", content="Next steps", type="bullet", bullets=["Hire", "Ship"]),
            Slide(id="3", title="Visual", content="Chart", type="image", image_placeholder="Revenue chart"),
        ],
    )


def test_render_contains_every_slide():
    html = render_presentation(sample_deck(), ":root { --primary: #123456; }")
    soup = BeautifulSoup(html, "html.parser")

    assert soup.title.string == "Q1 Update"
    assert soup.find("h1", class_="presentation-title").get_text() == "Q1 Update"
    assert [h.get_text() for h in soup.find_all("h2", class_="slide-title")] == ["Revenue", "Plan", "Visual"]
    assert [d.get_text() for d in soup.find_all("div", class_="slide-number")] == ["1", "2", "3"]
    assert [li.get_text() for li in soup.select(".slide-bullets li")] == ["Hire", "Ship"]
    assert soup.find("div", class_="slide-image-placeholder").get_text() == "Revenue chart"
    assert "--primary: #123456;" in soup.style.string


def test_render_counts_match():
    html = render_presentation(sample_deck(), "")
    assert count_slides(html) == 3


def test_default_tokens_used_without_css():
    html = render_presentation(sample_deck(), None)
    assert DEFAULT_CSS_VARIABLES in html


def test_slide_text_is_escaped():
    deck = Deck(title="<script>alert(1)</script>", slides=[Slide(id="1", title="A & B", content="<b>bold</b>")])
    html = render_presentation(deck, "")

    assert "<script>alert(1)</script>" not in html
    assert "&lt;b&gt;bold&lt;/b&gt;" in html
    assert "A &amp; B" in html


def test_css_cannot_close_style_block():
    css = ":root { --a: 1px; }</style><script>alert(1)</script>"
    html = render_presentation(sample_deck(), css)
    soup = BeautifulSoup(html, "html.parser")

    assert soup.find("script") is None
    assert len(soup.find_all("style")) == 1
    assert sanitize_css("</STYLE>") == "<\\/STYLE>"


def test_count_slides():
    html = """
    <div class="slide">1</div>
    <section class="slide title-slide">2</section>
    <div class="slide-number">not a slide</div>
    <div class="slides">container</div>
    """
    assert count_slides(html) == 2
    assert count_slides("") == 0
    assert count_slides("<p>no slides</p>") == 0
