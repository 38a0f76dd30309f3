import random
from typing import Sequence

import pytest

from src.narrative.engine import generate, generate_report
from src.narrative.models import CrowdLevel, ObservationRecord, ServicePeriod
from src.narrative.phrasebank import load_phrasebank
from src.narrative.sanitize import split_sentences
from src.narrative.settings import NarrativeSettings


class ScriptedRandom:
    """Random source that replays fixed indexes and draws.

    A pick of ``-1`` (or the default ``-1``) selects the last eligible option.
    """

    def __init__(
        self,
        picks: Sequence[int] = (),
        draws: Sequence[float] = (),
        *,
        default_pick: int = 0,
        default_draw: float = 0.0,
    ) -> None:
        self.picks = list(picks)
        self.draws = list(draws)
        self.default_pick = default_pick
        self.default_draw = default_draw

    def randrange(self, stop: int) -> int:
        pick = self.picks.pop(0) if self.picks else self.default_pick
        if pick < 0:
            return stop - 1
        return min(pick, stop - 1)

    def random(self) -> float:
        return self.draws.pop(0) if self.draws else self.default_draw


def _gentle_texts():
    opening = load_phrasebank().periods["lunch"].slots["opening"]
    return [v.text.rstrip("。、") for v in opening.variants if "gentle_start" in v.when]


def _brisk_texts():
    opening = load_phrasebank().periods["lunch"].slots["opening"]
    return [v.text.rstrip("。、") for v in opening.variants if "brisk_start" in v.when]


def test_lunch_end_to_end_with_first_choices():
    record = ObservationRecord(
        service=ServicePeriod.LUNCH,
        weather="晴れ",
        customer_tags=("家族連れ",),
        peak_range="12-14",
        crowd_feel="満席",
        best_seller_tags=("親子丼",),
    )
    out = generate(record, ScriptedRandom())
    assert out == (
        "天気は晴れで、立ち上がりは落ち着いた入りでした。 "
        "家族連れの来店が目立ち、12時から14時にかけて注文が重なりました。 "
        "フードコート内は体感で「満席」くらいで、"
        "立て込みましたが、崩れるほどではなく回せています、親子丼が多めに出ています。"
    )


def test_lunch_closed_weather_lead_keeps_three_sentences():
    record = ObservationRecord(
        service=ServicePeriod.LUNCH,
        weather="雨",
        customer_tags=("会社員",),
        customer_free_text="学生",
        peak_range="11-13",
        best_seller_tags=("親子丼",),
        best_seller_free_text="から揚げ、ジュース",
        event_present=True,
        event_name="物産展",
        notice="明日は10時に点検があります",
    )
    rng = ScriptedRandom(picks=[2, 0, 1, 2, 0, 2, 1, 0, 0])
    out = generate(record, rng)
    assert out == (
        "天気は雨でした。 "
        "早い時間帯から動きが出ていて、会社員や学生が多い印象で、11時から13時頃がピークでした。 "
        "波はありつつも無理なく回せた印象です、親子丼とから揚げがよく動きました（物産展も入っていました）。 "
        "連絡事項：明日は10時に点検があります"
    )


def test_dinner_end_to_end_with_last_choices():
    record = ObservationRecord(
        service=ServicePeriod.DINNER,
        customer_tags=("学生", "会社員"),
        customer_free_text="観光客",
        peak_range="18:30-20:00",
        crowd_feel="空席が多め",
        best_seller_tags=("から揚げ", "親子丼", "ジュース"),
        notice="明日は棚卸しです",
    )
    report = generate_report(record, ScriptedRandom(default_pick=-1, default_draw=0.99))
    assert report.crowd_level is CrowdLevel.QUIET
    assert report.text == (
        "夜は静かめで、学生、会社員、観光客などが多い印象でした。 "
        "18時30分以降に注文が集まりました。 "
        "比較的落ち着いて対応できました、から揚げと親子丼がよく動きました。 "
        "連絡事項：明日は棚卸しです"
    )
    assert report.sentence_count == 4


def test_dinner_quiet_can_mention_tidying_and_feel_detail():
    record = ObservationRecord(
        service=ServicePeriod.DINNER,
        customer_tags=("家族連れ",),
        peak_range="17-19",
        crowd_feel="空席あり",
        best_seller_tags=("親子丼",),
    )
    rng = ScriptedRandom(picks=[0, 0, 0, 1, 0, 0, 0, 1], draws=[0.1])
    out = generate(record, rng)
    assert out == (
        "夕方以降は落ち着いた雰囲気で、家族連れの来店が目立ちました。 "
        "フードコート内は「空席あり」に近い印象で、17時から19時あたりで注文が重なりました。 "
        "片づけまで含めて整えやすく、落ち着いた時間帯が多めでした、親子丼の注文が目立ちました。"
    )


def test_dinner_tidy_is_never_used_unless_quiet():
    record = ObservationRecord(
        service=ServicePeriod.DINNER,
        customer_tags=("家族連れ",),
        peak_range="17-19",
        crowd_feel="満席",
        best_seller_tags=("親子丼",),
    )
    for seed in range(200):
        out = generate(record, random.Random(seed))
        assert "片づけ" not in out and "仕込み" not in out


def test_same_seed_gives_same_text():
    record = ObservationRecord(
        service=ServicePeriod.LUNCH,
        weather="くもり",
        customer_tags=("観光客",),
        peak_range="12:30-13:30",
        crowd_feel="8割",
        best_seller_tags=("ゆず塩親子丼", "から揚げ"),
        event_present=True,
        event_name="物産展",
    )
    assert generate(record, random.Random(7)) == generate(record, random.Random(7))
    texts = {generate(record, random.Random(seed)) for seed in range(30)}
    assert len(texts) > 1


@pytest.mark.parametrize(
    "service,peak",
    [(ServicePeriod.DINNER, "18-20"), (ServicePeriod.DINNER, "12-14"), (ServicePeriod.LUNCH, "11-13")],
)
def test_calm_start_is_never_selected_outside_its_condition(service, peak):
    record = ObservationRecord(
        service=service,
        weather="晴れ",
        customer_tags=("学生",),
        peak_range=peak,
        crowd_feel="ふつう",
        best_seller_tags=("親子丼",),
    )
    gentle = _gentle_texts()
    for seed in range(300):
        out = generate(record, random.Random(seed))
        assert not any(text in out for text in gentle)


def test_calm_start_shows_up_for_lunch_from_noon():
    record = ObservationRecord(
        service=ServicePeriod.LUNCH,
        weather="晴れ",
        customer_tags=("学生",),
        peak_range="12-14",
        best_seller_tags=("親子丼",),
    )
    gentle, brisk = _gentle_texts(), _brisk_texts()
    outputs = [generate(record, random.Random(seed)) for seed in range(100)]
    assert all(not any(text in out for text in brisk) for out in outputs)
    assert sum(any(text in out for text in gentle) for out in outputs) == len(outputs)


def test_lunch_strips_closing_vocabulary_but_dinner_keeps_it():
    fields = dict(
        weather="晴れ",
        customer_free_text="片付け中の常連",
        peak_range="12-14",
        best_seller_tags=("親子丼",),
    )
    lunch = generate(ObservationRecord(service=ServicePeriod.LUNCH, **fields), ScriptedRandom())
    dinner = generate(ObservationRecord(service=ServicePeriod.DINNER, **fields), ScriptedRandom())
    assert "片付け" not in lunch and "中の常連" in lunch
    assert "片付け中の常連" in dinner


def test_forbidden_vocabulary_never_reaches_the_output():
    bank = load_phrasebank()
    record = ObservationRecord(
        service=ServicePeriod.LUNCH,
        weather="晴れ",
        customer_free_text="回転寿司帰りの学生",
        peak_range="12-14",
        crowd_feel="着席率9割",
        best_seller_tags=("親子丼",),
        event_present=True,
        event_name="推移観察会",
        notice="本日の流れを共有します。発注は済み",
    )
    for seed in range(100):
        out = generate(record, random.Random(seed))
        for term in bank.forbidden:
            assert term not in out


@pytest.mark.parametrize("service", list(ServicePeriod))
def test_body_stays_within_sentence_limit(service):
    record = ObservationRecord(
        service=service,
        weather="晴れ",
        customer_tags=("学生", "会社員", "観光客"),
        peak_range="12-14",
        crowd_feel="空席あり",
        best_seller_tags=("親子丼", "から揚げ"),
        event_present=True,
        event_name="物産展",
    )
    for seed in range(100):
        report = generate_report(record, random.Random(seed))
        assert 2 <= report.sentence_count <= 3
        assert report.text.count("。") <= 3


def test_max_sentences_setting_clamps_the_body():
    record = ObservationRecord(
        service=ServicePeriod.LUNCH,
        weather="晴れ",
        customer_tags=("学生",),
        peak_range="12-14",
        best_seller_tags=("親子丼",),
        notice="明日は休み",
    )
    settings = NarrativeSettings(max_sentences=1)
    out = generate(record, ScriptedRandom(), settings=settings)
    assert out == "天気は晴れで、立ち上がりは落ち着いた入りでした。 連絡事項：明日は休み"


def test_malformed_fields_degrade_instead_of_raising():
    record = ObservationRecord(
        service=ServicePeriod.LUNCH,
        peak_range="お昼どき",
        best_seller_tags=(),
    )
    out = generate(record, ScriptedRandom())
    assert "お昼どき" in out
    assert split_sentences(out)


def test_service_may_be_given_as_plain_string():
    record = ObservationRecord(
        service="dinner",
        customer_tags=("学生",),
        peak_range="18-20",
        best_seller_tags=("親子丼",),
    )
    assert generate(record, random.Random(3))


def test_lunch_notice_drops_closing_vocabulary():
    record = ObservationRecord(
        service=ServicePeriod.LUNCH,
        weather="晴れ",
        customer_tags=("学生",),
        peak_range="12-14",
        best_seller_tags=("親子丼",),
        notice="片づけは明日に回します",
    )
    for seed in range(20):
        out = generate(record, random.Random(seed))
        assert "片づけ" not in out
        assert out.endswith("連絡事項：は明日に回します")


def test_dinner_notice_keeps_closing_vocabulary():
    record = ObservationRecord(
        service=ServicePeriod.DINNER,
        customer_tags=("学生",),
        peak_range="18-20",
        best_seller_tags=("親子丼",),
        notice="片づけは明日に回します",
    )
    assert generate(record, ScriptedRandom()).endswith("連絡事項：片づけは明日に回します")


@pytest.mark.parametrize("max_sentences", [1, 2, 3])
def test_multi_sentence_notice_counts_as_one_sentence(max_sentences):
    record = ObservationRecord(
        service=ServicePeriod.LUNCH,
        weather="晴れ",
        customer_tags=("学生",),
        peak_range="12-14",
        crowd_feel="満席",
        best_seller_tags=("親子丼",),
        notice="発注済み。点検あり。明日は休み。",
    )
    settings = NarrativeSettings(max_sentences=max_sentences)
    for seed in range(30):
        report = generate_report(record, random.Random(seed), settings=settings)
        assert report.sentence_count <= max_sentences + 1
        assert report.text.endswith("連絡事項：発注済み、点検あり、明日は休み。")
