from langfile_translator.entry_parser import extract_entries
from langfile_translator.validator import (
    check_encoding_and_mojibake,
    check_markup_parity,
    run_post_translation_validation
)


class TestMarkupParity:

    def test_same_tags_in_another_order(self):
        assert check_markup_parity("<b>a</b> <i>b</i>", "<i>x</i> <b>y</b>")

    def test_missing_tag(self):
        assert not check_markup_parity('<i class="fa"></i> Delete', '<i class="fa"> Obriši')


class TestEncodingChecks:

    def test_clean_text(self):
        assert check_encoding_and_mojibake("Sačuvaj promene, Größe, café") == []

    def test_mojibake_detected(self):
        errors = check_encoding_and_mojibake("GrÃ¶ÃŸe")
        assert any("mojibake" in e for e in errors)

    def test_replacement_character_detected(self):
        errors = check_encoding_and_mojibake("Gr�ße")
        assert any("replacement character" in e for e in errors)


class TestPostTranslationValidation:

    def test_reports_leftover_sentinels_and_mismatches(self):
        content = "'a' => '<b>Save</b>', 'b' => '<i>x</i> Delete', 'c' => 'Plain',"
        entries = extract_entries(content)

        warnings = run_post_translation_validation(
            entries, ["__TAG_0__Sačuvaj__TAG_1__", "<i>x Obriši", "Obično"], content, preserve_markup=True
        )

        assert warnings == [
            "Unrestored markup placeholder left in key 'a'.",
            "Markup mismatch for key 'b'.",
        ]

    def test_markup_mismatch_ignored_without_protection(self):
        content = "'b' => '<i>x</i> Delete',"
        entries = extract_entries(content)

        assert run_post_translation_validation(entries, ["x Obriši"], content, preserve_markup=False) == []
