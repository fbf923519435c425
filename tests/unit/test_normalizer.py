from qgen.recovery.normalizer import normalize_questions


def _one(record, **kwargs):
    out = normalize_questions([record], **kwargs)
    assert len(out) == 1
    return out[0]


def test_mcq_with_option_letter():
    q = _one({
        "type": "multiple-choice",
        "question": "What is 2+2?",
        "options": ["3", "4", "5", "6"],
        "correctAnswer": "B",
        "explanation": "Basic arithmetic",
    })
    assert q.type == "multiple-choice"
    assert q.options == ["3", "4", "5", "6"]
    assert q.correct_answer == "B"
    assert q.correct_answer_letter == "B"
    assert q.explanation == "Basic arithmetic"
    assert q.has_images is False


def test_options_mapping_ordered_by_key():
    q = _one({
        "type": "multiple-choice",
        "question": "Capital of France?",
        "options": {"B": "London", "A": "Paris"},
        "correctAnswer": "A",
    })
    assert q.options == ["Paris", "London"]
    assert q.correct_answer_letter == "A"


def test_choices_used_when_options_missing():
    q = _one({"type": "multiple-choice", "question": "Pick", "choices": ["x", "y"], "correctAnswer": "a"})
    assert q.options == ["x", "y"]
    assert q.correct_answer_letter == "A"


def test_mixed_option_elements_become_strings():
    q = _one({
        "type": "multiple-choice",
        "question": "Pick one",
        "options": [{"text": "x"}, 3, 2.5, 4.0, {"id": 1}],
        "correctAnswer": "A",
    }, protect=False)
    assert q.options == ["x", "3", "2.5", "4", '{"id":1}']


def test_options_dropped_for_other_types():
    q = _one({
        "type": "true-false",
        "question": "Sky is blue",
        "options": ["True", "False"],
        "correctAnswer": "True",
    })
    assert q.options == []
    assert q.correct_answer == "True"
    assert q.correct_answer_letter == "T"


def test_custom_mcq_type():
    record = {"type": "mcq", "question": "Q", "options": ["a", "b"], "correctAnswer": "A"}
    assert _one(record).options == []
    assert _one(record, mcq_type="mcq").options == ["a", "b"]


def test_type_is_trimmed_before_comparison():
    q = _one({"type": " multiple-choice ", "question": "Q", "options": ["a"], "correctAnswer": "A"})
    assert q.type == "multiple-choice"
    assert q.options == ["a"]


def test_list_answer_joined_by_newline():
    q = _one({"type": "short-answer", "question": "Name two", "correctAnswer": [" a ", "b", "", 3]}, protect=False)
    assert q.correct_answer == "a\nb"
    assert q.correct_answer_letter is None


def test_answer_key_used_as_fallback():
    q = _one({"type": "short-answer", "question": "6*7?", "answer": " 42 "})
    assert q.correct_answer == "42"
    assert q.correct_answer_letter is None


def test_non_string_answer_is_serialized():
    q = _one({"type": "short-answer", "question": "Q", "correctAnswer": {"x": 1}}, protect=False)
    assert q.correct_answer == '{"x":1}'
    assert _one({"question": "Q", "correctAnswer": 7}).correct_answer == "7"


def test_letter_taken_from_leading_character():
    q = _one({"type": "multiple-choice", "question": "Q", "options": ["3", "4"], "correctAnswer": "b) 4"})
    assert q.correct_answer == "b) 4"
    assert q.correct_answer_letter == "B"


def test_missing_fields_get_defaults():
    q = _one({"prompt": "Explain photosynthesis"})
    assert q.type == "unknown"
    assert q.question == "Explain photosynthesis"
    assert q.options == []
    assert q.correct_answer == ""
    assert q.correct_answer_letter is None
    assert q.explanation == ""


def test_records_without_content_are_skipped():
    out = normalize_questions([
        {"type": "multiple-choice"},
        "junk",
        None,
        {"question": "   "},
        {"prompt": "Explain"},
    ])
    assert [q.question for q in out] == ["Explain"]


def test_none_input():
    assert normalize_questions(None) == []
    assert normalize_questions([]) == []


def test_display_protection_applied_to_every_field():
    q = _one({
        "type": "multiple-choice",
        "question": "It costs $5",
        "options": ["$5", "$x+1$"],
        "correctAnswer": "A",
        "explanation": "Line one\nLine two",
    })
    assert q.question == "It costs &#36;5"
    assert q.options == ["&#36;5", "$x+1$"]
    assert q.explanation == "Line one\n\nLine two"


def test_protection_can_be_disabled():
    q = _one({"question": "It costs $5", "correctAnswer": "5"}, protect=False)
    assert q.question == "It costs $5"


def test_inline_placeholder_produces_image_prompt():
    q = _one({
        "type": "short-answer",
        "question": "Find the area. [IMG: right triangle with legs 3 and 4]",
        "correctAnswer": "6",
    })
    assert q.has_images is True
    assert len(q.image_prompts) == 1
    prompt = q.image_prompts[0]
    assert prompt.placeholder == "question_img_1"
    assert prompt.prompt == "right triangle with legs 3 and 4"
    assert prompt.placement == "question"
    assert prompt.style == "educational_diagram"


def test_explicit_image_prompts_used_without_placeholders():
    q = _one({
        "question": "Label the diagram",
        "correctAnswer": "A",
        "imagePrompts": [
            {"placeholder": "p1", "prompt": "a plant cell", "purpose": "diagram"},
            {"placeholder": "", "prompt": "dropped"},
            "junk",
        ],
    })
    assert [p.placeholder for p in q.image_prompts] == ["p1"]
    assert q.image_prompts[0].purpose == "diagram"
    assert q.has_images is True


def test_has_images_flag_respected():
    assert _one({"question": "Q", "hasImages": True}).has_images is True
    assert _one({"question": "Q", "hasImages": "yes"}).has_images is False


def test_to_dict_uses_camel_case_keys():
    d = _one({"type": "multiple-choice", "question": "Q", "options": ["a"], "correctAnswer": "A"}).to_dict()
    assert d["correctAnswer"] == "A"
    assert d["correctAnswerLetter"] == "A"
    assert d["imagePrompts"] == []
    assert d["hasImages"] is False
    assert "correct_answer" not in d
