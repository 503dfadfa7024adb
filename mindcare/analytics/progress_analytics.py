# progress analytics for the patient progress page and therapist dashboard
# category breakdown and module rows from the progress record,
# daily activity timeline from the module activity logs

import logging
from typing import Any, Dict, List

import pandas as pd

from mindcare.models.progress import PatientTherapyProgress
from mindcare.utils import percent_of

logger = logging.getLogger(__name__)


def _module_frame(progress: PatientTherapyProgress) -> pd.DataFrame:
    return pd.DataFrame([
        {
            "module_id": m.id,
            "module": m.name,
            "category": m.category,
            "completed": m.completed_sessions,
            "total": m.total_sessions,
        }
        for m in progress.modules
    ], columns=["module_id", "module", "category", "completed", "total"])


def compute_activity_timeline(entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """count entries per calendar day, using 'date' when present, else 'createdAt'"""
    if not entries:
        return []

    df = pd.DataFrame(entries)
    raw = pd.Series([None] * len(df), index=df.index, dtype=object)
    for column in ("createdAt", "date"):
        if column in df.columns:
            raw = df[column].where(df[column].notna(), raw)

    days = pd.to_datetime(raw.astype(str).str[:10], format="%Y-%m-%d", errors="coerce").dropna()
    if days.empty:
        return []

    counts = days.dt.strftime("%Y-%m-%d").value_counts().sort_index()
    return [{"date": str(day), "count": int(n)} for day, n in counts.items()]


def compute_progress_analytics(
    progress: PatientTherapyProgress,
    entries: List[Dict[str, Any]],
) -> Dict[str, Any]:
    df = _module_frame(progress)

    by_category = df.groupby("category", sort=False)[["completed", "total"]].sum().reset_index()
    category_breakdown = [
        {
            "category": str(row["category"]),
            "completed": int(row["completed"]),
            "total": int(row["total"]),
            "percentage": percent_of(int(row["completed"]), int(row["total"])),
        }
        for _, row in by_category.iterrows()
    ]

    module_progress = [
        {
            "moduleId": str(row["module_id"]),
            "module": str(row["module"]),
            "completed": int(row["completed"]),
            "total": int(row["total"]),
            "progress": percent_of(int(row["completed"]), int(row["total"])),
        }
        for _, row in df.iterrows()
    ]

    result = {
        "userId": progress.user_id,
        "overallProgress": progress.overall_progress,
        "totalCompletedSessions": progress.total_completed_sessions,
        "activeModules": int((df["completed"] > 0).sum()) if not df.empty else 0,
        "finishedModules": int((df["completed"] >= df["total"]).sum()) if not df.empty else 0,
        "categoryBreakdown": category_breakdown,
        "moduleProgress": module_progress,
        "activityTimeline": compute_activity_timeline(entries),
    }
    logger.debug(f"Computed progress analytics for {progress.user_id}")
    return result
