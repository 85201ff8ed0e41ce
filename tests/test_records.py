from gpa_suite.models import Course, Semester
from gpa_suite.records import (
    add_course,
    add_semester,
    import_transcript,
    new_course,
    remove_course,
    remove_semester,
    rename_semester,
    semester_name_options,
    suggest_semester_name,
    toggle_retake,
    update_course,
    update_semester,
)


def test_suggest_first_semester_uses_current_year():
    assert suggest_semester_name(None, 0, current_year=2025) == "Monsoon (2025)"


def test_suggest_follows_term_sequence():
    assert suggest_semester_name("Monsoon (2023)", 1) == "Spring (2024)"
    assert suggest_semester_name("Spring 2024", 2) == "Summer (2024)"
    assert suggest_semester_name("summer(2024)", 3) == "Monsoon (2024)"
    assert suggest_semester_name("Winter 2024", 4) == "Spring (2024)"


def test_suggest_falls_back_to_counter():
    assert suggest_semester_name("Gap year", 2) == "Semester 3"
    assert suggest_semester_name("", 5) == "Semester 6"


def test_semester_name_options():
    options = semester_name_options(2025)
    assert len(options) == 24
    assert options[:3] == ["Monsoon (2021)", "Spring (2021)", "Summer (2021)"]
    assert options[-1] == "Summer (2028)"


def test_add_semester_does_not_mutate_input():
    record = [Semester(name="Monsoon (2023)")]
    updated = add_semester(record)

    assert len(record) == 1
    assert [s.name for s in updated] == ["Monsoon (2023)", "Spring (2024)"]
    assert add_semester([], current_year=2030)[0].name == "Monsoon (2030)"


def test_update_rename_and_remove_semester():
    first, second = Semester(name="One"), Semester(name="Two")
    record = [first, second]

    changed = Semester(id=second.id, name="Two", courses=[Course(name="X")])
    assert update_semester(record, changed)[1] is changed
    assert rename_semester(record, first.id, "Uno")[0].name == "Uno"
    assert record[0].name == "One"
    assert remove_semester(record, first.id) == [second]


def test_course_operations():
    semester = Semester(name="Spring (2024)")

    blank = new_course()
    assert (blank.name, blank.grade, blank.credits, blank.is_retake) == ("", "A", 4.0, False)

    with_course = add_course(semester, blank)
    assert semester.courses == []
    assert with_course.courses == [blank]

    edited = Course(id=blank.id, name="Calc 1", grade="B", credits=3)
    with_edit = update_course(with_course, edited)
    assert with_edit.courses[0].name == "Calc 1"

    toggled = toggle_retake(with_edit, blank.id)
    assert toggled.courses[0].is_retake is True
    assert with_edit.courses[0].is_retake is False

    assert remove_course(toggled, blank.id).courses == []


def test_add_course_defaults_to_a_new_blank_course():
    semester = add_course(Semester())
    assert len(semester.courses) == 1
    assert semester.courses[0].grade == "A"


def test_import_transcript_appends():
    record = [Semester(name="Existing")]
    updated, imported = import_transcript(record, "Spring 2024\n1 CS102 Data Structures 4 B 4 12")

    assert [s.name for s in updated] == ["Existing", "Spring 2024"]
    assert imported == updated[1:]
    assert len(record) == 1


def test_import_transcript_with_nothing_found_keeps_record():
    record = [Semester(name="Existing")]
    assert import_transcript(record, "nothing useful") == (record, [])
    assert import_transcript(record, "   ") == (record, [])
