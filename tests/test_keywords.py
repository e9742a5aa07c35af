from recruitops.services.keywords import (
    analyze_job_description, build_keyword_sets, detect_companies, detect_markets,
    detect_role, detect_skills,
)

VOIS_JD = (
    "Senior Graphic Designer needed, must know Photoshop, Illustrator, based in Cairo, "
    "Vodafone International experience a plus"
)


class TestDetection:

    def test_specific_role_wins(self):
        assert detect_role("We need an art director with a graphic designer background") == "Art Director"

    def test_default_role(self):
        assert detect_role("Looking for someone great to join us") == "Professional"

    def test_alias_implies_skills(self):
        skills = detect_skills("Fluent in the Adobe Creative Suite")
        assert "Photoshop" in skills
        assert "Illustrator" in skills

    def test_exact_skills_come_first_and_are_capped(self):
        skills = detect_skills("Figma, React, Docker, AWS, Python, Adobe Creative Suite")
        assert len(skills) == 5
        assert "Photoshop" not in skills

    def test_company_priority_not_input_order(self):
        assert detect_companies("ex-IBM, ex-Vodafone") == ["Vodafone International Services", "IBM"]

    def test_markets(self):
        assert detect_markets("Serving the Saudi market and wider GCC") == ["Saudi Arabia", "GCC"]


class TestKeywordSets:

    def test_vodafone_scenario(self):
        analysis = analyze_job_description(VOIS_JD)
        assert analysis.role == "Graphic Designer"
        assert "Photoshop" in analysis.skills
        assert "Illustrator" in analysis.skills
        assert analysis.companies[0] == "Vodafone International Services"
        assert analysis.keyword_sets[0] == ["Graphic Designer", "Egypt", "Vodafone International Services"]

    def test_market_fills_first_slot_without_company(self):
        analysis = analyze_job_description("Graphic designer for our KSA clients, remote friendly")
        assert analysis.keyword_sets[0] == ["Graphic Designer", "Egypt", "Saudi Arabia"]

    def test_terse_description_still_yields_queries(self):
        sets = analyze_job_description("Looking for someone great to join us").keyword_sets
        assert 1 <= len(sets) <= 5
        for combo in sets:
            assert "Professional" in combo
            assert "Egypt" in combo or "Cairo" in combo

    def test_shape_bounds(self):
        for jd in [VOIS_JD, "Backend engineer with Python and Docker in Riyadh", "HR manager, Dubai office"]:
            sets = analyze_job_description(jd).keyword_sets
            assert 1 <= len(sets) <= 5
            assert all(2 <= len(combo) <= 4 and all(combo) for combo in sets)
            assert len({tuple(c) for c in sets}) == len(sets)

    def test_company_led_fifth_slot(self):
        sets = build_keyword_sets("Graphic Designer", ["Photoshop"], ["IBM"], ["UAE"])
        assert ["IBM", "Egypt", "UAE"] in sets
        assert sets[3] == ["Graphic Designer", "Photoshop", "Egypt"]
