"""
Test: AI-generated text heuristics — thresholds, weights, reason order.
"""
import pytest
from classroom_backend.services.ai_detection import (
    analyze_text_for_ai, AI_PHRASES,
    REASON_STRUCTURED, REASON_UNIFORM, REASON_IMPERSONAL, REASON_LONG,
)


def phrase_reason(phrase):
    return f'Obsahuje typickou AI frázi: "{phrase}"'


class TestShortText:
    def test_empty(self):
        result = analyze_text_for_ai("")
        assert result.is_likely_ai is False
        assert result.confidence == 0
        assert result.reasons == []

    def test_short_text_with_ai_phrase_is_ignored(self):
        text = "Jako umělá inteligence nemohu poskytnout názor."
        assert len(text) < 100
        result = analyze_text_for_ai(text)
        assert result.confidence == 0
        assert result.reasons == []

    def test_99_characters(self):
        result = analyze_text_for_ai("v dnešní době " + "a" * 85)
        assert result.confidence == 0

    def test_exactly_100_characters_is_analyzed(self):
        text = "v dnešní době " + "a" * 86
        assert len(text) == 100
        result = analyze_text_for_ai(text)
        assert result.confidence == pytest.approx(0.3)
        assert result.is_likely_ai is True
        assert result.reasons == [phrase_reason("v dnešní době")]


class TestCoercion:
    def test_none(self):
        result = analyze_text_for_ai(None)
        assert result.confidence == 0
        assert result.reasons == []

    def test_bytes(self, ai_text):
        result = analyze_text_for_ai(ai_text.encode("utf-8"))
        assert result.is_likely_ai is True

    def test_invalid_utf8_bytes(self):
        result = analyze_text_for_ai(b"\xff\xfe" * 200)
        assert 0 <= result.confidence <= 1

    def test_number(self):
        assert analyze_text_for_ai(12345).confidence == 0


class TestPhrases:
    def test_two_phrases_in_table_order(self, ai_text):
        assert len(ai_text) >= 200
        result = analyze_text_for_ai(ai_text)
        assert result.confidence == pytest.approx(0.6)
        assert result.is_likely_ai is True
        assert result.reasons == [
            phrase_reason("jako umělá inteligence"),
            phrase_reason("je důležité poznamenat"),
        ]

    def test_case_insensitive(self, human_text):
        result = analyze_text_for_ai(human_text + " JAKO UMĚLÁ INTELIGENCE")
        assert result.reasons == [phrase_reason("jako umělá inteligence")]

    def test_mixed_case_phrase_in_table(self, human_text):
        result = analyze_text_for_ai(human_text + " a jako ai to nevím")
        assert result.reasons == [phrase_reason("jako AI")]

    def test_all_phrases_cap_confidence(self, human_text):
        text = human_text + " " + ", ".join(AI_PHRASES)
        result = analyze_text_for_ai(text)
        assert result.confidence == 1.0
        assert result.is_likely_ai is True
        assert result.reasons[:len(AI_PHRASES)] == [phrase_reason(p) for p in AI_PHRASES]

    def test_phrase_counted_once(self, human_text):
        text = human_text + " v dnešní době, v dnešní době, v dnešní době"
        result = analyze_text_for_ai(text)
        assert result.confidence == pytest.approx(0.3)


class TestStructure:
    def test_six_bullets(self):
        text = (
            "Můj seznam věcí, které já potřebuji na výlet s rodinou do hor a ještě "
            "několik dalších drobností na cestu:\n"
            "- batoh\n- spacák\n- čelovka\n- nůž\n- voda\n- mapa\n"
        )
        result = analyze_text_for_ai(text)
        assert result.reasons == [REASON_STRUCTURED]
        assert result.confidence == pytest.approx(0.2)
        assert result.is_likely_ai is False

    def test_five_bullets_not_enough(self):
        text = (
            "Můj seznam věcí, které já potřebuji na výlet s rodinou do hor a ještě "
            "několik dalších drobností na cestu:\n"
            "- batoh\n- spacák\n- čelovka\n- nůž\n- voda\n"
        )
        assert REASON_STRUCTURED not in analyze_text_for_ai(text).reasons

    def test_round_bullets_with_indent(self):
        lines = "\n".join(f"  • položka {i}" for i in range(6))
        text = "Tohle je můj nákupní seznam, který jsem psal já sám včera večer doma:\n" + lines
        assert len(text) >= 100
        assert REASON_STRUCTURED in analyze_text_for_ai(text).reasons

    def test_blank_lines_between_bullets(self):
        items = "\n\n".join(f"* bod {i}" for i in range(6))
        text = "Moje poznámky z hodiny, které jsem si já zapsal do sešitu:\n\n" + items
        assert len(text) >= 100
        assert REASON_STRUCTURED in analyze_text_for_ai(text).reasons

    def test_eight_numbered_lines(self):
        prose = "Tady je můj postup, jak jsem já řešil úlohu z matematiky na doma, krok po kroku"
        lines = "\n".join(f"{i}. krok číslo {i}" for i in range(1, 9))
        result = analyze_text_for_ai(prose + "\n" + lines)
        assert REASON_STRUCTURED in result.reasons
        assert result.confidence >= 0.2

    def test_bullet_without_space_not_counted(self):
        lines = "\n".join(f"-položka{i}" for i in range(8))
        text = "Můj seznam, který jsem já sepsal pro náš oddíl na letní tábor u rybníka:\n" + lines
        assert REASON_STRUCTURED not in analyze_text_for_ai(text).reasons


class TestSentenceUniformity:
    def test_identical_sentences(self):
        text = "Pes běžel rychle přes louku. " * 6
        result = analyze_text_for_ai(text)
        assert result.reasons == [REASON_UNIFORM]
        assert result.confidence == pytest.approx(0.15)
        assert result.is_likely_ai is False

    def test_varied_sentences(self):
        text = (
            "Ráno pršelo hodně. "
            "Pak jsme s tátou a mámou jeli autem k babičce, která bydlí daleko za městem u lesa. "
            "Babička upekla buchty. "
            "Odpoledne jsme všichni šli na dlouhou procházku kolem rybníka a pozorovali jsme "
            "kachny, labutě a jednu volavku, která stála úplně bez hnutí na jedné noze. "
            "Večer byl klid."
        )
        assert REASON_UNIFORM not in analyze_text_for_ai(text).reasons

    def test_four_sentences_skip_check(self):
        text = "Pes běžel rychle přes louku. " * 4 + "a" * 5
        assert REASON_UNIFORM not in analyze_text_for_ai(text).reasons

    def test_short_fragments_ignored(self):
        # Fragments of 10 characters or less don't count as sentences
        text = "Ano. Ne. Asi. Možná. Jo. " * 10
        assert REASON_UNIFORM not in analyze_text_for_ai(text).reasons


class TestPersonalPronouns:
    def test_impersonal_long_text(self):
        result = analyze_text_for_ai("slovo " * 120)
        assert result.reasons == [REASON_IMPERSONAL]
        assert result.confidence == pytest.approx(0.1)

    def test_two_pronouns_enough(self):
        text = "můj " + "slovo " * 120 + "moje"
        assert REASON_IMPERSONAL not in analyze_text_for_ai(text).reasons

    def test_uppercase_pronouns(self):
        text = "MŮJ " + "slovo " * 120 + "NAŠE"
        assert REASON_IMPERSONAL not in analyze_text_for_ai(text).reasons

    def test_accented_pronouns_before_space_not_counted(self):
        # Word boundaries are ASCII-only: "á" and "é" are not word characters
        result = analyze_text_for_ai("já mé " + "slovo " * 120)
        assert result.reasons == [REASON_IMPERSONAL]
        assert result.confidence == pytest.approx(0.1)

    def test_one_ascii_ending_pronoun_not_enough(self):
        text = "já a můj " + "slovo " * 120
        assert REASON_IMPERSONAL in analyze_text_for_ai(text).reasons

    def test_accented_pronoun_before_ascii_letter_counted(self):
        text = "mého " + "slovo " * 120 + "mébo"
        assert REASON_IMPERSONAL not in analyze_text_for_ai(text).reasons

    def test_pronoun_prefix_not_counted(self):
        # "my" inside "myslet", "nás" inside "násobit"
        text = "myslet násobit " * 60
        assert REASON_IMPERSONAL in analyze_text_for_ai(text).reasons

    def test_pronoun_after_accented_letter_counted(self):
        # "č" is not a word character, so "my" starts a word here
        text = "čmy " + "slovo " * 120 + "čmy"
        assert REASON_IMPERSONAL not in analyze_text_for_ai(text).reasons

    def test_short_text_not_checked(self):
        text = "slovo " * 50
        assert REASON_IMPERSONAL not in analyze_text_for_ai(text).reasons


class TestLength:
    def test_long_paste_alone(self, human_text):
        text = ((human_text + " ") * 25)[:2500]
        assert len(text) == 2500
        result = analyze_text_for_ai(text)
        assert result.reasons == [REASON_LONG]
        assert result.confidence == pytest.approx(0.1)
        assert result.is_likely_ai is False

    def test_2000_characters_not_long(self, human_text):
        text = ((human_text + " ") * 20)[:2000]
        assert REASON_LONG not in analyze_text_for_ai(text).reasons


class TestScenarios:
    def test_personal_essay_not_flagged(self):
        text = (
            "Já jsem minulý týden byl s naší třídou na exkurzi v pivovaru. "
            "Moc se mi tam líbilo. "
            "Průvodce nám ukázal, jak se vaří slad a proč musí kvasit tak dlouho, "
            "a my jsme se mohli podívat i do sklepa, kde stály obrovské tanky. "
            "Můj kamarád Petr se ptal na všechno možné a paní učitelka se smála. "
            "Cestou zpátky jsme v autobuse zpívali. "
            "Doma jsem to všechno vyprávěl mámě a tátovi a ti říkali, že tam taky "
            "jednou pojedou, protože moje vyprávění znělo opravdu zajímavě a "
            "naše třída prý měla velké štěstí, že se tam vůbec dostala, protože "
            "exkurze jsou prý vyprodané na celý rok dopředu. "
            "Druhý den ve škole jsme o výletu psali sloh. "
            "Já jsem napsal skoro tři stránky, ale Petr jen půl stránky, protože "
            "ho bolela ruka z fotbalu. "
            "Paní učitelka nás pochválila a řekla, že příště pojedeme do sklárny "
            "nebo do muzea. "
            "Těším se. Byl to krásný den."
        )
        assert len(text.split()) >= 150
        assert len(text) < 2000
        result = analyze_text_for_ai(text)
        assert result.is_likely_ai is False
        assert result.reasons == []

    def test_combined_checks_in_order(self):
        text = (
            "V dnešní době je třeba zdůraznit několik bodů.\n"
            + "\n".join(f"- bod číslo {i} je stejně dlouhý." for i in range(6))
        )
        result = analyze_text_for_ai(text)
        assert result.reasons[0] == phrase_reason("v dnešní době")
        assert result.reasons[1] == phrase_reason("je třeba zdůraznit")
        assert result.reasons[2] == REASON_STRUCTURED
        assert result.is_likely_ai is True


class TestInvariants:
    SAMPLES = [
        "",
        "a" * 99,
        "slovo " * 500,
        "Pes běžel rychle přes louku. " * 100,
        "jako umělá inteligence " * 50,
        "\n".join("- x" for _ in range(50)),
        "!!!???..." * 40,
        "\x00\x01\x02 binary �" * 30,
    ]

    @pytest.mark.parametrize("text", SAMPLES)
    def test_confidence_bounded_and_threshold_consistent(self, text):
        result = analyze_text_for_ai(text)
        assert 0 <= result.confidence <= 1
        assert result.is_likely_ai == (result.confidence >= 0.3)

    @pytest.mark.parametrize("text", SAMPLES)
    def test_deterministic(self, text):
        assert analyze_text_for_ai(text) == analyze_text_for_ai(text)

    def test_huge_input(self):
        result = analyze_text_for_ai("Toto je věta. \n\n  " * 20000)
        assert 0 <= result.confidence <= 1

    def test_to_dict(self, ai_text):
        data = analyze_text_for_ai(ai_text).to_dict()
        assert set(data) == {"is_likely_ai", "confidence", "reasons"}
        assert data["is_likely_ai"] is True
