"""
Reading context for the interpretation layer.

Packs a CalculatedBazi into a single JSON-ready payload and renders the
user prompt sent to the remote text-generation service, which fabricates
the 100-year series. The remote call itself lives outside this package.
"""

from datetime import datetime
from typing import Optional

from destiny.bazi import CalculatedBazi
from destiny.luck import Direction, Sex, resolve_direction
from destiny.pillars import Pillar, Polarity, classify_polarity

DA_YUN_STEPS = 10
CHILDHOOD_LABEL = "童限"
LIFESPAN_YEARS = 100

SEX_LABELS = {
    Sex.MALE: "男 (乾造)",
    Sex.FEMALE: "女 (坤造)",
}

POLARITY_LABELS = {
    Polarity.YANG: "阳",
    Polarity.YIN: "阴",
}


def da_yun_schedule(start_age: int, first_da_yun: str, direction: Direction) -> list[dict]:
    """
    Age slots of the childhood period and the ten Luck Pillars.

    Only the first Luck Pillar is named; the later ones are left to the
    interpretation layer, which continues the sequence in `direction`.
    """
    schedule = []
    if start_age > 1:
        schedule.append({
            "step": 0,
            "age_start": 1,
            "age_end": start_age - 1,
            "da_yun": CHILDHOOD_LABEL,
        })
    for i in range(DA_YUN_STEPS):
        age_start = start_age + i * 10
        schedule.append({
            "step": i + 1,
            "age_start": age_start,
            "age_end": age_start + 9,
            "da_yun": first_da_yun if i == 0 else None,
        })
    return schedule


def generate_reading_context(bazi: CalculatedBazi, sex: Sex,
                             name: Optional[str] = None,
                             birth_year: Optional[int] = None,
                             manual_override: bool = False) -> dict:
    """
    Generate the complete context payload for a reading.

    Args:
        bazi: calculation result
        sex: sex the chart was calculated for
        name: optional display name
        birth_year: Gregorian birth year
        manual_override: True when the pillars were typed in by the user
            rather than calculated
    """
    year_polarity = classify_polarity(bazi.year_pillar)
    direction = resolve_direction(sex, year_polarity)

    positions = ("year", "month", "day", "hour")
    pillars = {}
    for position, label in zip(positions, bazi.pillars):
        pillars[position] = Pillar.parse(label).to_dict()

    return {
        "generated_at": datetime.now().isoformat(),
        "user": {
            "name": name,
            "sex": sex.value,
            "birth_year": birth_year,
        },
        "source": "manual" if manual_override else "calculated",
        "pillars": pillars,
        "year_polarity": year_polarity.value,
        "da_yun": {
            "direction": direction.value,
            "direction_label": direction.label,
            "start_age": bazi.start_age,
            "first": bazi.first_da_yun,
            "schedule": da_yun_schedule(bazi.start_age, bazi.first_da_yun, direction),
        },
    }


def render_user_prompt(context: dict) -> str:
    """Natural-language request built from a reading context."""
    user = context["user"]
    pillars = context["pillars"]
    da_yun = context["da_yun"]
    sex = Sex(user["sex"])
    polarity = Polarity(context["year_polarity"])
    source_note = "(用户手动输入)" if context["source"] == "manual" else "(系统自动计算)"
    birth_year = f"{user['birth_year']}年 (阳历)" if user["birth_year"] else "未提供"

    lines = [
        "请根据以下**已经排好的**八字四柱和**指定的大运信息**进行分析。",
        f"注：本次数据{source_note}",
        "",
        "【基本信息】",
        f"性别：{SEX_LABELS[sex]}",
        f"姓名：{user['name'] or '未提供'}",
        f"出生年份：{birth_year}",
        "",
        "【八字四柱】",
        f"年柱：{pillars['year']['label']} (天干属性：{POLARITY_LABELS[polarity]})",
        f"月柱：{pillars['month']['label']}",
        f"日柱：{pillars['day']['label']}",
        f"时柱：{pillars['hour']['label']}",
        "",
        "【大运核心参数】",
        f"1. 起运年龄：{da_yun['start_age']} 岁 (虚岁)。",
        f"2. 第一步大运：{da_yun['first']}。",
        f"3. **排序方向**：{da_yun['direction_label']}。",
        "",
        "【大运序列】",
    ]
    for slot in da_yun["schedule"]:
        if slot["step"] == 0:
            label = slot["da_yun"]
        elif slot["da_yun"]:
            label = f"第{slot['step']}步大运: {slot['da_yun']}"
        else:
            label = f"第{slot['step']}步大运"
        lines.append(f"- Age {slot['age_start']} 到 {slot['age_end']}: daYun = {label}")

    lines += [
        "",
        "任务：",
        f"1. 根据六十甲子顺序和方向（{da_yun['direction_label']}），推算出第一步之后的 "
        f"{DA_YUN_STEPS - 1} 步大运。",
        f"2. 生成 1-{LIFESPAN_YEARS} 岁 (虚岁) 的人生流年K线数据。",
        "3. 生成带评分的命理分析报告。",
    ]
    return "\n".join(lines)
