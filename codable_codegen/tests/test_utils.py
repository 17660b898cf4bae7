"""
Tests for the shared naming helpers.
"""

import pytest

from codable_codegen.utils import snake_to_pascal_case


class TestSnakeToPascalCase:
    """One conversion serves transformer names and case key names."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("hex_color", "HexColor"),
            ("iso8601_date", "Iso8601Date"),
            ("not_found", "NotFound"),
            ("stepCount", "StepCount"),
            ("success", "Success"),
            ("_private", "Private"),
            ("", ""),
        ],
    )
    def test_conversion(self, text, expected):
        assert snake_to_pascal_case(text) == expected

    def test_transformer_and_case_key_names_agree(self, expand):
        output = expand(
            """
            from typing import Annotated
            from codable_codegen import Case, CodingTransformer, Variant, codable, coding_key

            class StepCountTransform:
                def encode(self, value):
                    return value

                def decode(self, value):
                    return value

            @codable
            class Tracker:
                steps: Annotated[int, coding_key(transform=CodingTransformer.stepCount)]

            @codable
            class Reading(Variant):
                stepCount = Case(int)
            """
        )

        assert "transformer = StepCountTransform()" in output
        assert "class StepCountCodingKeys(CodingKey):" in output


if __name__ == "__main__":
    pytest.main([__file__])
