"""
Test Suite for the Scoring Core
===============================
Unit and end-to-end tests for models, detectors, the structure analyzer
and the scoring aggregator.
"""

from __future__ import annotations

import json

import pytest

from cvscan import analyzer
from cvscan.analyzer import (
    MANDATORY_SECTIONS,
    SECTION_ORDER,
    StructureAnalyzer,
    check_bullets,
    check_font_family,
    check_mandatory_sections,
    check_section_order,
    check_summary_length,
    check_template,
    count_summary_words,
    has_bullets,
    is_official_template,
    is_section_heading,
    locate_sections,
)
from cvscan.detectors import (
    detect_colored_background,
    detect_photo,
    detect_template_font,
    detect_visual_features,
    fill_color_from_args,
)
from cvscan.engine import ScannerConfig, ScanEngine
from cvscan.models import (
    DocumentText,
    Finding,
    OperatorKind,
    PageOperator,
    PageSignals,
    ScanResult,
    ScoreCard,
    StructureReport,
    VisualSignals,
)
from cvscan.scoring import (
    ScoringAggregator,
    apply_cap,
    apply_finding,
    bonus_finding,
    build_result,
    clamp,
    failed_result,
    fold_findings,
    visual_findings,
)


# ═══════════════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════════════


TEMPLATE_HEADER = [
    "Jane Doe",
    "Name – Inter Bold, Size 12",
    "Headings – Inter SemiBold, size 8.6",
    "Keep the summary to 50–80 words",
]


def summary_lines(words: int) -> list[str]:
    tokens = ["lorem"] * words
    return [" ".join(tokens[i:i + 10]) for i in range(0, words, 10)]


def resume_text(
    *,
    template: bool = True,
    inter: bool = True,
    summary_words: int = 60,
    sections: tuple[str, ...] = MANDATORY_SECTIONS,
    bullets: bool = True,
) -> str:
    lines = []
    if template:
        lines.extend(TEMPLATE_HEADER)
    else:
        lines.append("Jane Doe")
        if inter:
            lines.append("Typeface: Inter")

    for section in sections:
        lines.append(section)
        if section == "PROFESSIONAL SUMMARY":
            lines.extend(summary_lines(summary_words))
        elif bullets:
            lines.append("• Delivered quarterly results")
        else:
            lines.append("Delivered quarterly results")

    return "\n".join(lines)


def doc(text: str) -> DocumentText:
    return DocumentText.from_text(text)


def page(number: int = 1, operators=(), fonts=(), error=None) -> PageSignals:
    return PageSignals(
        page_number=number,
        operators=list(operators),
        fonts=set(fonts),
        error=error,
    )


def op(kind: OperatorKind, *args) -> PageOperator:
    return PageOperator(kind=kind, args=args)


def rgb(r, g, b) -> PageOperator:
    return op(OperatorKind.SET_FILL_COLOR_RGB, r, g, b)


FILL = PageOperator(kind=OperatorKind.FILL_PATH)


# ═══════════════════════════════════════════════════════════════════════════════
# MODEL TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestDocumentText:
    """Test DocumentText line derivation."""

    def test_lines_are_trimmed_and_non_empty(self):
        document = doc("  First line  \n\n   \nSecond\n")
        assert document.lines == ("First line", "Second")

    def test_raw_text_preserved(self):
        document = doc("A\nB")
        assert document.raw == "A\nB"

    def test_empty_text(self):
        document = DocumentText.from_text("")
        assert document.lines == ()

    def test_immutable(self):
        document = doc("A")
        with pytest.raises(Exception):
            document.raw = "B"


class TestScanResult:
    """Test ScanResult serialization."""

    def test_passed_threshold(self):
        assert ScanResult(ats_score=90).passed is True
        assert ScanResult(ats_score=89).passed is False

    def test_camel_case_aliases(self):
        result = ScanResult(
            ats_score=85,
            is_official_template=False,
            has_photo=True,
            message="Score: 85/100",
            issues=["Not using official template"],
        )
        data = json.loads(json.dumps(result.model_dump(by_alias=True)))

        assert data["atsScore"] == 85
        assert data["passed"] is False
        assert data["isOfficialTemplate"] is False
        assert data["hasPhoto"] is True
        assert data["hasColoredBackground"] is False
        assert data["hasTemplateFont"] is False
        assert data["issues"] == ["Not using official template"]

    def test_score_bounds_enforced(self):
        with pytest.raises(Exception):
            ScanResult(ats_score=101)


# ═══════════════════════════════════════════════════════════════════════════════
# DETECTOR TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestPhotoDetector:
    """Test the first-page image detector."""

    def test_sole_paint_image(self):
        assert detect_photo([page(operators=[op(OperatorKind.PAINT_IMAGE)])])

    def test_paint_jpeg(self):
        assert detect_photo([page(operators=[op(OperatorKind.PAINT_JPEG)])])

    def test_no_image_operators(self):
        pages = [page(operators=[rgb(0, 0, 0), FILL, op(OperatorKind.OTHER)])]
        assert detect_photo(pages) is False

    def test_only_first_page_inspected(self):
        pages = [
            page(1, operators=[FILL]),
            page(2, operators=[op(OperatorKind.PAINT_IMAGE)]),
        ]
        assert detect_photo(pages) is False

    def test_failed_first_page(self):
        assert detect_photo([page(1, error="broken stream")]) is False

    def test_no_pages(self):
        assert detect_photo([]) is False

    def test_never_raises(self):
        assert detect_photo(None) is False


class TestColoredBackgroundDetector:
    """Test the fill color replay."""

    def test_white_fill(self):
        assert detect_colored_background(
            [page(operators=[rgb(1, 1, 1), FILL])]
        ) is False

    def test_gray_rgb_fill(self):
        assert detect_colored_background(
            [page(operators=[rgb(0.5, 0.5, 0.5), FILL])]
        ) is True

    def test_default_color_is_black(self):
        assert detect_colored_background([page(operators=[FILL])]) is True

    def test_near_white_threshold(self):
        assert detect_colored_background(
            [page(operators=[rgb(0.95, 0.96, 1.0), FILL])]
        ) is False
        assert detect_colored_background(
            [page(operators=[rgb(0.94, 1.0, 1.0), FILL])]
        ) is True

    def test_grayscale_setter(self):
        pages = [page(operators=[
            op(OperatorKind.SET_FILL_COLOR_GRAY, 1.0),
            op(OperatorKind.EO_FILL_PATH),
        ])]
        assert detect_colored_background(pages) is False

    def test_cmyk_setter(self):
        white = [page(operators=[
            op(OperatorKind.SET_FILL_COLOR_CMYK, 0, 0, 0, 0), FILL,
        ])]
        black = [page(operators=[
            op(OperatorKind.SET_FILL_COLOR_CMYK, 0, 0, 0, 1), FILL,
        ])]
        assert detect_colored_background(white) is False
        assert detect_colored_background(black) is True

    def test_color_without_fill_ignored(self):
        pages = [page(operators=[rgb(0.2, 0.4, 0.8), op(OperatorKind.OTHER)])]
        assert detect_colored_background(pages) is False

    def test_last_color_before_fill_wins(self):
        pages = [page(operators=[rgb(0.2, 0.4, 0.8), rgb(1, 1, 1), FILL])]
        assert detect_colored_background(pages) is False

    def test_shading_is_colored(self):
        pages = [page(operators=[op(OperatorKind.SHADING_FILL)])]
        assert detect_colored_background(pages) is True

    def test_color_state_resets_per_page(self):
        pages = [
            page(1, operators=[rgb(1, 1, 1), FILL]),
            page(2, operators=[FILL]),
        ]
        assert detect_colored_background(pages) is True

    def test_pages_beyond_limit_ignored(self):
        pages = [
            page(1, operators=[rgb(1, 1, 1), FILL]),
            page(4, operators=[op(OperatorKind.SHADING_FILL)]),
        ]
        assert detect_colored_background(pages) is False

    def test_failed_page_skipped(self):
        pages = [
            page(1, error="unreadable"),
            page(2, operators=[rgb(0.1, 0.1, 0.1), FILL]),
        ]
        assert detect_colored_background(pages) is True

    def test_malformed_args_keep_running_color(self):
        pages = [page(operators=[
            rgb(1, 1, 1),
            op(OperatorKind.SET_FILL_COLOR_RGB, "a", None, 1),
            op(OperatorKind.SET_FILL_COLOR_RGB),
            op(OperatorKind.SET_FILL_COLOR_RGB, 0.1, 0.1),
            FILL,
        ])]
        assert detect_colored_background(pages) is False

    def test_fill_color_resolution(self):
        assert fill_color_from_args([0.5]) == (0.5, 0.5, 0.5)
        assert fill_color_from_args([0.1, 0.2, 0.3]) == (0.1, 0.2, 0.3)
        assert fill_color_from_args([0, 0, 0, 0.5]) == (0.5, 0.5, 0.5)
        assert fill_color_from_args([]) is None
        assert fill_color_from_args([0.1, 0.2]) is None
        assert fill_color_from_args([True]) is None


class TestTemplateFontDetector:
    """Test the rendered font family detector."""

    def test_inter_font(self):
        assert detect_template_font([page(fonts=["Inter-Regular"])])

    def test_case_insensitive(self):
        assert detect_template_font([page(fonts=["ABCDEF+INTER-Bold"])])

    def test_other_fonts(self):
        assert detect_template_font(
            [page(fonts=["Helvetica", "Times-Roman"])]
        ) is False

    def test_later_page(self):
        pages = [page(1, fonts=["Arial"]), page(3, fonts=["Inter-Medium"])]
        assert detect_template_font(pages) is True

    def test_pages_beyond_limit_ignored(self):
        pages = [page(1, fonts=["Arial"]), page(4, fonts=["Inter"])]
        assert detect_template_font(pages) is False


class TestVisualFeatures:
    """Test the combined detector entry point."""

    def test_all_signals(self):
        pages = [page(
            operators=[op(OperatorKind.PAINT_IMAGE), op(OperatorKind.SHADING_FILL)],
            fonts=["Inter"],
        )]
        visual = detect_visual_features(pages)
        assert visual == VisualSignals(
            has_photo=True,
            has_colored_background=True,
            has_template_font=True,
        )

    def test_no_pages(self):
        assert detect_visual_features([]) == VisualSignals()


# ═══════════════════════════════════════════════════════════════════════════════
# ANALYZER TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestTemplateCheck:
    """Test the official template markers."""

    def test_official_template(self):
        assert is_official_template(doc(resume_text())) is True
        assert check_template(doc(resume_text())) == []

    def test_markers_absent(self):
        findings = check_template(doc(resume_text(template=False)))
        assert findings == [
            Finding(message="Not using official template", cap=85)
        ]

    def test_markers_without_name_line(self):
        text = "\n".join([
            "Jane Doe",
            "Font Inter, Size 12 for the name",
            "Headings size 8.6",
            "Summary of 50–80 words",
        ])
        assert is_official_template(doc(text)) is False

    def test_name_line_case_insensitive(self):
        text = "\n".join([
            "NAME in INTER at SIZE 12",
            "Inter Size 12 size 8.6 50–80 words",
        ])
        assert is_official_template(doc(text)) is True

    def test_name_line_outside_window(self):
        lines = [f"filler {i}" for i in range(20)]
        lines.append("Name – Inter, Size 12")
        lines.append("size 8.6 50–80 words")
        assert is_official_template(doc("\n".join(lines))) is False

    def test_markers_are_case_sensitive(self):
        text = "Name – Inter, Size 12\nSIZE 8.6\n50–80 words"
        assert is_official_template(doc(text)) is False


class TestMandatorySections:
    """Test mandatory section detection."""

    def test_all_present(self):
        assert check_mandatory_sections(doc(resume_text())) == []

    def test_missing_languages(self):
        sections = tuple(s for s in MANDATORY_SECTIONS if s != "LANGUAGES")
        findings = check_mandatory_sections(doc(resume_text(sections=sections)))

        languages = [f for f in findings if "LANGUAGES" in f.message]
        assert len(languages) == 1
        assert languages[0].delta == -10
        assert len(findings) == 1

    def test_case_insensitive_substring(self):
        text = "Professional Summary\nWork Experience\nMy Education\nSkills:\nlanguages"
        assert check_mandatory_sections(doc(text)) == []

    def test_each_missing_section_counts(self):
        findings = check_mandatory_sections(doc("nothing here"))
        assert [f.message for f in findings] == [
            f"Missing: {s}" for s in MANDATORY_SECTIONS
        ]
        assert all(f.delta == -10 for f in findings)


class TestSummaryLength:
    """Test the professional summary word count."""

    @pytest.mark.parametrize("words", [50, 65, 80])
    def test_within_range(self, words):
        document = doc(resume_text(summary_words=words))
        assert count_summary_words(document) == words
        assert check_summary_length(document) == []

    @pytest.mark.parametrize("words", [49, 81, 0])
    def test_out_of_range(self, words):
        findings = check_summary_length(doc(resume_text(summary_words=words)))
        assert findings == [Finding(
            message=f"Summary: {words} words (must 50–80)",
            delta=-10,
        )]

    def test_missing_summary_skipped(self):
        document = doc("WORK EXPERIENCE\n• Built things")
        assert count_summary_words(document) is None
        assert check_summary_length(document) == []

    def test_counting_stops_at_heading(self):
        text = "\n".join([
            "PROFESSIONAL SUMMARY",
            "one two three",
            "CORE COMPETENCIES",
            "four five six seven",
        ])
        assert count_summary_words(doc(text)) == 3

    def test_short_caps_line_does_not_stop(self):
        text = "professional summary\none two\nSKILLS\nthree four"
        assert count_summary_words(doc(text)) == 5

    def test_heading_pattern(self):
        assert is_section_heading("WORK EXPERIENCE")
        assert is_section_heading("EDUCATION")
        assert not is_section_heading("SKILLS")
        assert not is_section_heading("Work Experience")
        assert not is_section_heading("SKILLS & TOOLS")


class TestSectionOrder:
    """Test canonical section ordering."""

    def test_correct_order(self):
        assert check_section_order(doc(resume_text())) == []

    def test_education_before_work_experience(self):
        text = "PROFESSIONAL SUMMARY\nEDUCATION\nWORK EXPERIENCE"
        document = doc(text)

        assert locate_sections(document) == {
            "PROFESSIONAL SUMMARY": 0,
            "WORK EXPERIENCE": 2,
            "EDUCATION": 1,
        }
        findings = check_section_order(document)
        assert len(findings) >= 1
        assert Finding(message="Wrong order: WORK EXPERIENCE", delta=-5) in findings
        assert Finding(message="Wrong order: EDUCATION", delta=-5) in findings
        assert all(f.delta == -5 for f in findings)

    def test_missing_sections_ignored(self):
        text = "PROFESSIONAL SUMMARY\nSKILLS\nLANGUAGES"
        assert check_section_order(doc(text)) == []

    def test_optional_sections_ordered(self):
        text = "\n".join([
            "PROFESSIONAL SUMMARY",
            "WORK EXPERIENCE",
            "EDUCATION",
            "SKILLS",
            "CERTIFICATIONS",
            "CORE COMPETENCIES",
            "LANGUAGES",
        ])
        messages = [f.message for f in check_section_order(doc(text))]
        assert messages == [
            "Wrong order: CORE COMPETENCIES",
            "Wrong order: CERTIFICATIONS",
        ]

    def test_reversed_order_flags_every_section(self):
        text = "\n".join(reversed(SECTION_ORDER))
        findings = check_section_order(doc(text))
        assert len(findings) == len(SECTION_ORDER)


class TestFormattingChecks:
    """Test bullet and font family checks."""

    @pytest.mark.parametrize("glyph", ["•", "●", "◦", "-", "–"])
    def test_bullet_glyphs(self, glyph):
        assert has_bullets(doc(f"Intro\n{glyph} item"))

    def test_bullet_must_lead_line(self):
        assert has_bullets(doc("item - other\nplain * star")) is False

    def test_no_bullets_finding(self):
        findings = check_bullets(doc(resume_text(bullets=False)))
        assert findings == [Finding(message="No bullet points", delta=-5)]

    def test_inter_text_present(self):
        assert check_font_family(doc("Set in Inter")) == []

    def test_inter_text_absent(self):
        assert check_font_family(doc("Set in Arial, inter-alia")) == [
            Finding(message="Font not Inter", delta=-5)
        ]


class TestStructureAnalyzer:
    """Test rule evaluation order."""

    def test_perfect_document(self):
        report = StructureAnalyzer().analyze(doc(resume_text()))
        assert report == StructureReport(is_official_template=True, findings=[])

    def test_findings_follow_rule_order(self):
        text = "\n".join([
            "Jane Doe",
            "PROFESSIONAL SUMMARY",
            "too short",
            "EDUCATION",
            "WORK EXPERIENCE",
            "SKILLS",
        ])
        report = StructureAnalyzer().analyze(doc(text))

        assert report.is_official_template is False
        assert [f.message for f in report.findings] == [
            "Not using official template",
            "Missing: LANGUAGES",
            "Summary: 2 words (must 50–80)",
            "Wrong order: WORK EXPERIENCE",
            "Wrong order: EDUCATION",
            "No bullet points",
            "Font not Inter",
        ]

    def test_template_markers_checked_once(self, monkeypatch):
        calls = []

        def counting(document):
            calls.append(document)
            return True

        monkeypatch.setattr(analyzer, "is_official_template", counting)
        report = StructureAnalyzer().analyze(doc(resume_text()))

        assert len(calls) == 1
        assert report.is_official_template is True


# ═══════════════════════════════════════════════════════════════════════════════
# SCORING TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestScoringPrimitives:
    """Test caps, folds and the clamp."""

    @pytest.mark.parametrize("score", [-20, 0, 60, 85, 90, 100, 105])
    def test_cap_idempotent(self, score):
        once = apply_cap(score, 85)
        assert apply_cap(once, 85) == once
        assert once <= score

    def test_cap_never_raises(self):
        assert apply_cap(40, 85) == 40

    def test_finding_delta_then_cap(self):
        finding = Finding(message="x", delta=-30, cap=60)
        assert apply_finding(100, finding) == 60
        assert apply_finding(80, finding) == 50

    def test_fold(self):
        findings = [
            Finding(message="a", cap=85),
            Finding(message="b", delta=-10),
            Finding(message="c", delta=-5),
        ]
        assert fold_findings(findings) == 70

    def test_fold_empty(self):
        assert fold_findings([]) == 100

    @pytest.mark.parametrize("score,expected", [
        (-45, 0), (0, 0), (55, 55), (100, 100), (105, 100),
    ])
    def test_clamp(self, score, expected):
        assert clamp(score) == expected

    def test_visual_findings_order(self):
        findings = visual_findings(
            VisualSignals(has_photo=True, has_colored_background=True)
        )
        assert [f.message for f in findings] == [
            "Photo detected → Max score: 90",
            "Colored background → -30 & Max score: 60",
        ]
        assert findings[0].delta == 0 and findings[0].cap == 90


class TestBonus:
    """The +5 bonus needs all four conditions."""

    def test_bonus_fires(self):
        assert bonus_finding(95, True, VisualSignals()) == Finding(
            message="Perfect format → +5 bonus", delta=5
        )

    def test_score_below_threshold(self):
        assert bonus_finding(94, True, VisualSignals()) is None

    def test_not_official(self):
        assert bonus_finding(100, False, VisualSignals()) is None

    def test_photo(self):
        assert bonus_finding(100, True, VisualSignals(has_photo=True)) is None

    def test_colored_background(self):
        visual = VisualSignals(has_colored_background=True)
        assert bonus_finding(100, True, visual) is None

    def test_template_font_irrelevant(self):
        visual = VisualSignals(has_template_font=False)
        assert bonus_finding(100, True, visual) is not None


class TestScoringAggregator:
    """Test the full scoring precedence."""

    def aggregate(self, findings=(), official=True, **visual):
        report = StructureReport(
            is_official_template=official,
            findings=list(findings),
        )
        return ScoringAggregator().aggregate(report, VisualSignals(**visual))

    def test_perfect_score_with_bonus(self):
        card = self.aggregate()
        assert card.score == 100
        assert [f.message for f in card.findings] == ["Perfect format → +5 bonus"]

    def test_photo_caps_at_90(self):
        card = self.aggregate(has_photo=True)
        assert card.score == 90
        assert card.findings[-1].message == "Photo detected → Max score: 90"

    def test_colored_background(self):
        card = self.aggregate(has_colored_background=True)
        assert card.score == 60

    def test_colored_background_after_deductions(self):
        card = self.aggregate(
            findings=[Finding(message="Missing: SKILLS", delta=-10)],
            has_colored_background=True,
        )
        assert card.score == 60

    def test_colored_background_subtracts_below_cap(self):
        card = self.aggregate(
            findings=[Finding(message="x", delta=-40)],
            has_colored_background=True,
        )
        assert card.score == 30

    def test_template_cap_reapplied(self):
        card = self.aggregate(official=False)
        assert card.score == 85

    def test_bonus_at_threshold(self):
        card = self.aggregate(findings=[Finding(message="x", delta=-5)])
        assert card.score == 100
        assert card.findings[-1].message == "Perfect format → +5 bonus"

    def test_deduction_below_threshold_blocks_bonus(self):
        card = self.aggregate(findings=[Finding(message="x", delta=-10)])
        assert card.score == 90
        assert all("bonus" not in f.message for f in card.findings)

    def test_clamped_at_zero(self):
        card = self.aggregate(
            findings=[Finding(message="x", delta=-95)],
            has_colored_background=True,
        )
        assert card.score == 0

    @pytest.mark.parametrize("official", [True, False])
    @pytest.mark.parametrize("photo", [True, False])
    @pytest.mark.parametrize("colored", [True, False])
    @pytest.mark.parametrize("delta", [0, -5, -30, -120])
    def test_score_in_range(self, official, photo, colored, delta):
        card = self.aggregate(
            findings=[Finding(message="x", delta=delta)],
            official=official,
            has_photo=photo,
            has_colored_background=colored,
        )
        assert 0 <= card.score <= 100
        if photo or colored or not official:
            assert all("bonus" not in f.message for f in card.findings)


class TestResultBuilding:
    """Test ScanResult construction."""

    def test_placeholder_when_no_findings(self):
        card = self.card(score=100, findings=[])
        result = build_result(card)
        assert result.issues == ["Perfect CV!"]

    def test_passed_message(self):
        result = build_result(self.card(score=92))
        assert result.passed is True
        assert result.message.startswith("PASSED!")

    def test_failed_message(self):
        result = build_result(self.card(score=85))
        assert result.passed is False
        assert result.message == "Score: 85/100 – Use Official Template"

    def test_failed_result(self):
        result = failed_result()
        assert result.ats_score == 0
        assert result.passed is False
        assert result.message == "PDF Error"
        assert result.issues == ["Processing failed"]
        assert result.has_photo is False

    @staticmethod
    def card(score, findings=None):
        return ScoreCard(
            score=score,
            findings=findings if findings is not None else [
                Finding(message="x", delta=-1)
            ],
        )


# ═══════════════════════════════════════════════════════════════════════════════
# END-TO-END (SYNTHETIC SIGNALS)
# ═══════════════════════════════════════════════════════════════════════════════


class TestEngineEvaluate:
    """Score extracted text and page signals without a PDF."""

    @pytest.fixture(params=[True, False], ids=["parallel", "sequential"])
    def engine(self, request):
        return ScanEngine(ScannerConfig(parallel_rules=request.param))

    def test_unofficial_template_capped_at_85(self, engine):
        document = doc(resume_text(template=False, summary_words=65))
        result = engine.evaluate(document, [page(fonts=["Inter-Regular"])])

        assert result.is_official_template is False
        assert result.ats_score == 85
        assert result.passed is False
        assert result.issues == ["Not using official template"]

    def test_perfect_official_document(self, engine):
        document = doc(resume_text(summary_words=60))
        pages = [page(operators=[rgb(1, 1, 1), FILL], fonts=["Inter-Regular"])]
        result = engine.evaluate(document, pages)

        assert result.is_official_template is True
        assert result.ats_score == 100
        assert result.passed is True
        assert result.has_template_font is True
        assert result.issues == ["Perfect format → +5 bonus"]

    def test_photo_and_background(self, engine):
        document = doc(resume_text())
        pages = [page(operators=[
            op(OperatorKind.PAINT_JPEG),
            rgb(0.1, 0.3, 0.6),
            FILL,
        ])]
        result = engine.evaluate(document, pages)

        assert result.has_photo is True
        assert result.has_colored_background is True
        assert result.ats_score == 60
        assert result.issues == [
            "Photo detected → Max score: 90",
            "Colored background → -30 & Max score: 60",
        ]

    def test_missing_page_signals_degrade(self, engine):
        result = engine.evaluate(doc(resume_text()), [])
        assert result.has_photo is False
        assert result.has_colored_background is False
        assert result.ats_score == 100

    def test_failed_pages_degrade(self, engine):
        pages = [page(1, error="bad xref"), page(2, error="bad xref")]
        result = engine.evaluate(doc(resume_text()), pages)
        assert result.ats_score == 100
        assert result.has_template_font is False

    def test_rendered_font_does_not_change_score(self, engine):
        document = doc(resume_text(template=False))
        with_inter = engine.evaluate(document, [page(fonts=["Inter"])])
        without = engine.evaluate(document, [page(fonts=["Arial"])])
        assert with_inter.ats_score == without.ats_score
        assert with_inter.has_template_font != without.has_template_font


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
