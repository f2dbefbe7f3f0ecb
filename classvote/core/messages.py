"""Display strings shown to students and organizers.

The classroom UI is Japanese; labels that end up inside API payloads (chart
series names, vote-card badges, the empty summary) are kept here.
"""

VOTE_TYPE_LABELS = {
    "free_text": "自由記述",
    "multiple_choice": "多肢選択",
    "yes_no": "はい/いいえ",
}

VISIBILITY_LABELS = {
    "everyone": "全員に公開",
    "admin_only": "管理者のみ",
    "anonymous": "匿名",
}

STATUS_LABELS = {
    "open": "受付中",
    "closed": "終了",
}

UNKNOWN_LABEL = "不明"
UNKNOWN_OPTION_LABEL = "不明な選択肢"
CUSTOM_OPTION_LABEL = "（自由記述） {text}"
EMPTY_VOTE_LABEL = "（空の投票）"

EMPTY_SUMMARY = "要約する意見がありませんでした。"


def vote_type_label(vote_type: str) -> str:
    return VOTE_TYPE_LABELS.get(vote_type, UNKNOWN_LABEL)


def visibility_label(visibility: str) -> str:
    return VISIBILITY_LABELS.get(visibility, UNKNOWN_LABEL)


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, UNKNOWN_LABEL)
