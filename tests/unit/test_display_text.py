import pytest

from qgen.recovery.display_text import protect_display_text


def test_inline_math_is_untouched():
    assert protect_display_text("$x^2+y^2=z^2$") == "$x^2+y^2=z^2$"


def test_display_math_is_untouched():
    src = "$$\\int_0^1 x\\,dx = \\frac{1}{2}$$"
    assert protect_display_text(src) == src


def test_numeric_math_spans_are_untouched():
    src = "Find $103$ minus $97$."
    assert protect_display_text(src) == src


def test_currency_becomes_entity():
    out = protect_display_text("It costs $12.50")
    assert out == "It costs &#36;12.50"
    assert "$12" not in out


def test_currency_next_to_math():
    out = protect_display_text("The total is $45 and the equation $x+5=45$ holds.")
    assert out == "The total is &#36;45 and the equation $x+5=45$ holds."


def test_currency_ranges_are_not_math():
    assert protect_display_text("Tickets cost $5-$10 each.") == "Tickets cost &#36;5-&#36;10 each."
    assert protect_display_text("Pay $5, $6 or $7") == "Pay &#36;5, &#36;6 or &#36;7"


def test_escaped_currency_becomes_entity():
    assert protect_display_text(r"Price \$5") == "Price &#36;5"
    assert protect_display_text(r"Price \\$5") == "Price &#36;5"


def test_bare_amount_after_cost_word_gets_dollar():
    assert protect_display_text("The book costs 12.00 today") == "The book costs &#36;12.00 today"


def test_markdown_table_structure_kept():
    table = "| Item | Price |\n|------|-------|\n| Pen | $2 |\n| Book | $12 |"
    out = protect_display_text("Compare:\n" + table + "\nDone")
    assert out == "Compare:\n\n" + table + "\n\nDone"


def test_table_with_math_cells_restored_fully():
    src = "| x | $y^2$ |\n|---|---|\n| 1 | $\\frac{1}{2}$ |"
    out = protect_display_text(src)
    assert out == src
    assert not any("\ue000" <= ch <= "\uf8ff" for ch in out)


def test_table_sent_with_escaped_newlines():
    out = protect_display_text("| a | b |\\n|---|---|\\n| 1 | 2 |")
    assert out == "| a | b |\n|---|---|\n| 1 | 2 |"


def test_single_newlines_become_paragraph_breaks():
    assert protect_display_text("Line one\nLine two\n\n\n\nLine three") == "Line one\n\nLine two\n\nLine three"


def test_literal_backslash_n_becomes_break():
    assert protect_display_text("First\\nSecond") == "First\n\nSecond"


def test_bullets_normalized():
    assert protect_display_text("Steps:\n- mix\n* bake") == "Steps:\n\n• mix\n\n• bake"


def test_space_runs_collapsed_and_trimmed():
    assert protect_display_text("  a    b  ") == "a b"


@pytest.mark.parametrize("src", [
    "It costs $12.50 and $x = 3$",
    "Steps:\n- mix\n* bake\n\n\nserve",
    "Compare:\n| Item | Price |\n|---|---|\n| Pen | $2 |\nDone",
    "The book costs 12.00 today",
    "$$a^2$$ then \\$4",
])
def test_protect_is_idempotent(src):
    once = protect_display_text(src)
    assert protect_display_text(once) == once


def test_empty_and_non_string_returned_unchanged():
    assert protect_display_text("") == ""
    assert protect_display_text(None) is None
    assert protect_display_text(5) == 5


def test_inline_math_wrapped_over_one_line_is_kept():
    assert protect_display_text("Simplify $x +\ny$ today") == "Simplify $x +\ny$ today"


def test_inline_math_never_crosses_a_blank_line():
    assert protect_display_text("Costs $5\n\nand x$ more") == "Costs &#36;5\n\nand x$ more"
