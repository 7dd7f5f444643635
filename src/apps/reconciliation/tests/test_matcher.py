"""
Tests for institution matching.

Pure function tests - no Django dependencies needed.
"""

import itertools

import pytest

from apps.reconciliation.records import Employee, Institution
from apps.reconciliation.services.matcher import (
    InstitutionRef,
    explain_institution_match,
    extract_keywords,
    extract_sido,
    extract_sigungu,
    find_best_matching_institution,
    is_institution_code_match,
    is_institution_match,
    match_institution,
)


class TestNameMatching:
    """Known pairs from production uploads."""

    @pytest.mark.parametrize(
        "name1,name2,expected",
        [
            ("(광역)(재)경상남도사회서비스원", "경상남도사회서비스원", True),
            ("창원시종합사회복지관", "창원시 종합사회복지관", True),
            ("거제노인통합지원센터", "거제노인종합복지관", False),
            ("김해시노인종합복지관", "김해시 노인복지관", True),
            ("(사)경남장애인복지관", "경남장애인종합복지관", True),
            ("진주시 사회복지관", "진주시사회복지관", True),
            ("*광역지원기관 경상남도사회서비스원", "(광역)(재)경상남도사회서비스원", True),
        ],
    )
    def test_known_pairs(self, name1, name2, expected):
        assert is_institution_match(name1, name2) is expected

    def test_containment(self):
        assert is_institution_match("진주노인통합지원센터", "진주노인통합지원센터 본점")

    def test_keyword_overlap(self):
        assert is_institution_match("행복 나눔 돌봄 센터", "나눔 행복 재단")

    def test_single_shared_keyword_is_not_enough(self):
        assert not is_institution_match("행복 나눔 센터", "행복 돌봄 재단")

    def test_stopwords_and_single_characters_are_dropped(self):
        assert extract_keywords("창원 시 의 a 복지 센터") == ["창원", "복지", "센터"]

    def test_unrelated_names(self):
        assert not is_institution_match("통영노인통합지원센터", "사천노인통합지원센터")

    @pytest.mark.parametrize("missing", [None, "", "   "])
    def test_missing_names_never_match(self, missing):
        assert is_institution_match(missing, "창원시사회복지관") is False
        assert is_institution_match("창원시사회복지관", missing) is False


class TestCodeMatching:
    """Code comparison and its priority over names."""

    def test_codes_are_format_normalized(self):
        assert is_institution_code_match(" a48-310001 ", "A48310001")

    def test_missing_code(self):
        assert not is_institution_code_match(None, "A48310001")
        assert not is_institution_code_match("", "")

    def test_equal_codes_win_over_unrelated_names(self):
        a = InstitutionRef(code="I1", name="창원시사회복지관")
        b = InstitutionRef(code="i-1", name="전혀 다른 기관")
        assert match_institution(a, b)

    def test_different_codes_are_final(self):
        a = InstitutionRef(code="I1", name="창원시사회복지관")
        b = InstitutionRef(code="I2", name="창원시사회복지관")
        assert not match_institution(a, b)

    def test_falls_back_to_name_when_one_code_missing(self):
        a = InstitutionRef(code="I1", name="창원시종합사회복지관")
        b = InstitutionRef(code=None, name="창원시 사회복지관")
        assert match_institution(a, b)

    def test_records_and_dicts(self):
        employee = Employee(name="김철수", institution="다른이름", institution_code="I1")
        institution = Institution(code="I1", name="창원시사회복지관")
        assert match_institution(employee, institution)
        assert match_institution({"institution": "창원시 사회복지관"}, {"code": "I9", "name": "창원시사회복지관"})


class TestSymmetry:
    """match(a, b) == match(b, a)."""

    REFS = [
        InstitutionRef(code="I1", name="창원시종합사회복지관"),
        InstitutionRef(code=None, name="창원시 사회복지관"),
        InstitutionRef(code="I2", name="거제노인통합지원센터"),
        InstitutionRef(code=None, name="거제노인종합복지관"),
        InstitutionRef(code=None, name="행복 나눔 돌봄 센터"),
        InstitutionRef(code=None, name="나눔 행복 재단"),
        InstitutionRef(code=None, name="행복 나눔 나눔 재단"),
        InstitutionRef(code="i-1", name=None),
        InstitutionRef(code=None, name=None),
    ]

    def test_match_is_symmetric(self):
        for a, b in itertools.product(self.REFS, repeat=2):
            assert match_institution(a, b) == match_institution(b, a), (a, b)


class TestLookupHelpers:
    """Best-match search, explanation and region inference."""

    def test_find_best_prefers_code(self):
        institutions = [
            Institution(code="I1", name="창원시사회복지관"),
            Institution(code="I2", name="김해시노인복지관"),
        ]
        target = {"institution_code": "I2", "institution": "창원시사회복지관"}
        assert find_best_matching_institution(target, institutions).code == "I2"

    def test_find_best_by_name(self):
        institutions = [Institution(code="I1", name="창원시종합사회복지관")]
        target = {"institution": "창원시 사회복지관"}
        assert find_best_matching_institution(target, institutions) is institutions[0]

    def test_find_best_none(self):
        assert find_best_matching_institution({"institution": "없는기관"}, []) is None

    def test_explain(self):
        details = explain_institution_match("창원시종합사회복지관", "창원시 사회복지관")
        assert details["match"] is True
        assert details["location1"] == details["location2"] == "창원"
        assert details["facility1"] == details["facility2"] == "사회복지관"

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("경남노인통합지원센터", "경상남도"),
            ("진주노인통합지원센터", "경상남도"),
            ("수원시노인복지관", "경기도"),
            ("알수없는기관", ""),
            (None, ""),
        ],
    )
    def test_extract_sido(self, name, expected):
        assert extract_sido(name) == expected

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("김해시종합사회복지관", "김해시"),
            ("거창노인통합지원센터", "거창군"),
            ("알수없는기관", ""),
        ],
    )
    def test_extract_sigungu(self, name, expected):
        assert extract_sigungu(name) == expected
