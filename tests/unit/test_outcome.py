from langfile_translator.outcome import count_changed, count_entries, extract_values, summarize


class TestOutcome:

    def test_counts_all_quote_combinations(self):
        content = """'a' => 'one', "b" => 'two', 'c' => "three", "d" => "four","""

        assert extract_values(content) == ['one', 'two', 'three', 'four']
        assert count_entries(content) == 4

    def test_escaped_quotes_do_not_end_the_value(self):
        assert extract_values(r"'a' => 'Don\'t',") == [r"Don\'t"]

    def test_sample_document_entries(self, sample_document):
        assert count_entries(sample_document) == 13

    def test_identical_values_are_not_counted_as_translated(self):
        original = "'a' => 'Cancel', 'b' => 'Delete',"
        translated = "'a' => 'Otkaži', 'b' => 'Delete',"

        assert count_changed(original, translated) == 1
        assert count_changed(original, original) == 0

    def test_summary(self):
        summary = summarize("'a' => 'A', 'b' => 'B',", "'a' => 'X', 'b' => 'B',", 1.23456, "en", "sr-Latn")

        assert summary.item_count == 2
        assert summary.translated_count == 1
        assert summary.processing_time_seconds == 1.23
        assert summary.describe() == "Successfully translated 1 out of 2 items."

    def test_empty_document(self):
        summary = summarize("", "", 0.0, "en", "sr")

        assert summary.item_count == 0
        assert summary.translated_count == 0

    def test_commented_out_pairs_are_not_counted(self):
        content = (
            "// 'old' => 'Old value',\n"
            "# 'older' => 'Older value',\n"
            "/* 'oldest' => 'Oldest value', */\n"
            "    'new' => 'New value',"
        )

        assert extract_values(content) == ['New value']

    def test_multi_line_value_is_counted(self):
        content = "'long' => 'first line\nsecond line',\n    'b' => 'B',"

        assert extract_values(content) == ['first line\nsecond line', 'B']

    def test_concatenated_value_is_not_counted(self):
        content = "'built' => 'a' . 'b',\n    'plain' => 'Plain',\n    'dots' => 'Wait'...,"

        assert extract_values(content) == ['Plain', 'Wait']

    def test_summary_ignores_commented_pairs(self):
        original = "# 'a' => 'A',\n    'b' => 'B',"
        translated = "# 'a' => 'A',\n    'b' => 'Be',"

        summary = summarize(original, translated, 0.5, "en", "sr")

        assert (summary.item_count, summary.translated_count) == (1, 1)
