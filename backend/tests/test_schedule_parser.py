from timegrid.services.schedule_parser import parse_schedule


def test_parse_multi_session_schedule():
    sessions = parse_schedule("월1~3(C-101)<p>수4~5(C-102)")
    assert [(s.day, s.range, s.room) for s in sessions] == [
        ("월", (1, 2, 3), "C-101"),
        ("수", (4, 5), "C-102"),
    ]


def test_parse_single_slot_without_room():
    sessions = parse_schedule("금7")
    assert len(sessions) == 1
    assert sessions[0].day == "금"
    assert sessions[0].range == (7,)
    assert sessions[0].room == ""


def test_separator_is_case_insensitive_and_tolerates_spaces():
    sessions = parse_schedule("화 2~3 (A-1)<P>목10~11")
    assert [s.day for s in sessions] == ["화", "목"]
    assert sessions[0].room == "A-1"


def test_malformed_input_yields_no_sessions():
    assert parse_schedule("") == []
    assert parse_schedule(None) == []
    assert parse_schedule("???") == []
    assert parse_schedule("일1~2(X)") == []
    assert parse_schedule("월5~3(X)") == []


def test_bad_chunk_does_not_drop_good_ones():
    sessions = parse_schedule("월1~2(A)<p>garbage<p>토3(B)")
    assert [(s.day, s.range) for s in sessions] == [("월", (1, 2)), ("토", (3,))]


def test_ranges_past_the_last_slot_are_malformed():
    assert parse_schedule("월23~30(X)") == []
    assert parse_schedule("월24(X)") != []
    assert parse_schedule("월25(X)") == []


def test_huge_slot_numbers_are_dropped_without_expanding():
    assert parse_schedule("월1~1000000000(X)") == []
    assert parse_schedule("월1~" + "9" * 5000) == []
    sessions = parse_schedule("월1~3000000(X)<p>화1~2(Y)")
    assert [(s.day, s.range) for s in sessions] == [("화", (1, 2))]
