import pytest

from session_pricing.engine import ConfigurationError, Plan, default_plan_table, load_plan_table

HEADER = (
    "plan,label,base_price,base_duration_minutes,extension_unit_minutes,extension_price,"
    "room_base_price,room_base_duration_minutes,room_extension_unit_minutes,room_extension_price\n"
)


def write_csv(tmp_path, body):
    path = tmp_path / "plans.csv"
    path.write_text(HEADER + body, encoding="utf-8")
    return path


def test_default_table_covers_every_plan():
    table = default_plan_table()
    assert set(table) == set(Plan)
    assert table.get(Plan.VIP_A).has_room
    assert table.get(Plan.VIP_B).has_room
    assert not table.get(Plan.BAR).has_room
    assert not table.get(Plan.COUNTER).has_room


def test_table_cannot_be_mutated():
    table = default_plan_table()
    with pytest.raises(TypeError):
        table._plans[Plan.BAR] = None


def test_csv_overrides_replace_entries(tmp_path):
    path = write_csv(tmp_path, "BAR,Happy hour bar,2500,60,15,500,,,,\n")
    base = default_plan_table()

    table = load_plan_table(path, base=base)

    bar = table.get(Plan.BAR)
    assert bar.base_price == 2500
    assert bar.extension_unit_minutes == 15
    assert bar.label == "Happy hour bar"
    assert bar.room is None
    # untouched plans come from the base table, and the base is unchanged
    assert table.get(Plan.VIP_A) == base.get(Plan.VIP_A)
    assert base.get(Plan.BAR).base_price == 3000


def test_csv_room_track(tmp_path):
    path = write_csv(tmp_path, "vip_b,VIP B,15000,120,30,12000,25000,90,30,25000\n")
    room = load_plan_table(path).get(Plan.VIP_B).room
    assert (room.base_price, room.base_duration_minutes, room.extension_unit_minutes, room.extension_price) \
        == (25000, 90, 30, 25000)


def test_csv_without_room_columns(tmp_path):
    path = tmp_path / "plans.csv"
    path.write_text(
        "plan,base_price,base_duration_minutes,extension_unit_minutes,extension_price\n"
        "COUNTER,9000,60,10,1200\n",
        encoding="utf-8",
    )
    counter = load_plan_table(path).get(Plan.COUNTER)
    assert counter.base_price == 9000
    assert counter.room is None


@pytest.mark.parametrize("body", [
    "KARAOKE,Karaoke,1000,60,30,500,,,,\n",
    "BAR,Bar,abc,60,30,500,,,,\n",
    "BAR,Bar,3000,60,0,500,,,,\n",
    "BAR,Bar,3000,60,30,-5,,,,\n",
    "VIP_A,VIP,12000,120,30,10000,10000,,30,10000\n",
    "BAR,Bar,3000,90,30,1000,,,,\nBAR,Bar,3100,90,30,1000,,,,\n",
])
def test_bad_csv_rows_are_configuration_errors(tmp_path, body):
    with pytest.raises(ConfigurationError):
        load_plan_table(write_csv(tmp_path, body))


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_plan_table(tmp_path / "nope.csv")


def test_missing_required_column(tmp_path):
    path = tmp_path / "plans.csv"
    path.write_text("plan,base_price\nBAR,3000\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_plan_table(path)


@pytest.mark.parametrize("body", ["", "\n\n"])
def test_empty_file(tmp_path, body):
    path = tmp_path / "plans.csv"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_plan_table(path)
