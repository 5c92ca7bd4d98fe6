"""Streamlit UI for the job feed and tracker."""
from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from jobfeed.config import get_env, load_feed_settings
from jobfeed.errors import JobFeedError
from jobfeed.feed_store import FeedStore
from jobfeed.log import get_logger
from jobfeed.store import get_store
from jobfeed.tracker import TrackerStore

log = get_logger(__name__)

# ── Constants ────────────────────────────────────────────────────────────

STATUS_LABELS: dict[str, str] = {
    "want": "Want to apply",
    "applied": "Applied",
    "interview": "Interview",
    "offer": "Offer",
    "rejected": "Rejected",
}

_GLASS_CSS = """
<style>
[data-testid="stAppViewContainer"] {
    background: linear-gradient(135deg, #e8eaf6 0%, #f3e5f5 40%, #e0f2f1 100%);
}
[data-testid="stSidebar"] {
    background: rgba(255,255,255,0.55);
    backdrop-filter: blur(16px);
    border-right: 1px solid rgba(255,255,255,0.3);
}
.block-container {
    padding-top: 2rem;
}
[data-testid="stMetric"],
[data-testid="stExpander"] {
    background: rgba(255,255,255,0.6);
    backdrop-filter: blur(12px);
    padding: 0.75rem 1rem;
    border-radius: 12px;
    border: 1px solid rgba(255,255,255,0.4);
    box-shadow: 0 4px 16px rgba(0,0,0,0.06);
}
.stButton > button[kind="primary"] {
    border-radius: 8px;
    font-weight: 600;
}
h1, h2, h3 {
    color: #1a1a2e;
}
</style>
"""

# ── Helpers ──────────────────────────────────────────────────────────────


def _load_env() -> dict[str, str]:
    env_path = ROOT / ".env"
    values: dict[str, str] = {}
    if env_path.exists():
        for line in env_path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                k, _, v = line.partition("=")
                values[k.strip()] = v.strip()
    return values


def _save_env(values: dict[str, str]) -> None:
    env_path = ROOT / ".env"
    existing = _load_env()
    existing.update(values)
    lines = [f"{k}={v}" for k, v in existing.items()]
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def _status() -> dict[str, bool]:
    return {
        "reed": bool(get_env("REED_API_KEY")),
        "adzuna": bool(get_env("ADZUNA_APP_ID") and get_env("ADZUNA_APP_KEY")),
        "store": bool(get_env("KV_REST_API_URL") and get_env("KV_REST_API_TOKEN")),
    }


def _check(label: str, ok: bool) -> str:
    icon = "✅" if ok else "⬜"
    return f"{icon}  {label}"


def _feed_store() -> FeedStore:
    return FeedStore(get_store())


def _tracker() -> TrackerStore:
    return TrackerStore(get_store())


# ── Page: Feed ───────────────────────────────────────────────────────────


def page_feed() -> None:
    st.header("Job Feed")

    if st.button("Scan now", type="primary", use_container_width=True):
        with st.status("Scanning job boards…", expanded=True) as sw:
            try:
                from jobfeed.aggregator import run_scan
                from jobfeed.sources import get_sources

                sw.write("Querying sources in parallel…")
                result = run_scan(get_sources(get_env), _feed_store(), load_feed_settings())
                sw.update(label=f"Scan complete: {result.total_items} unique postings", state="complete")
            except Exception as exc:
                sw.update(label="Scan failed", state="error")
                st.error(str(exc))

    items, meta = _feed_store().read_visible_feed()

    counts = meta.get("countsPerSource", {})
    c1, c2, c3 = st.columns(3)
    c1.metric("Visible postings", len(items))
    c2.metric("Last scan", (meta.get("lastScan") or "never")[:16].replace("T", " "))
    c3.metric("Per source", " / ".join(f"{k} {v}" for k, v in counts.items()) or "—")

    if not items:
        st.divider()
        st.info("Nothing in the feed. Click **Scan now** to fetch postings.")
        return

    for item in items:
        with st.expander(f"{item.title} — {item.company}"):
            st.caption(f"{item.location} · {item.job_type or 'unspecified'} · {item.source} · {item.date_posted[:10]}")
            if item.salary_text:
                st.markdown(f"**{item.salary_text}**")
            st.write(item.description)
            if item.job_link:
                st.markdown(f"[Open posting]({item.job_link})")

            b1, b2 = st.columns(2)
            if b1.button("Add to tracker", key=f"add-{item.id}", use_container_width=True):
                _run_action(lambda: _promote(item.id), "Added to tracker.")
            if b2.button("Dismiss", key=f"dismiss-{item.id}", use_container_width=True):
                _run_action(lambda: _feed_store().dismiss(item.id), "Dismissed.")


def _promote(feed_item_id: str) -> None:
    from jobfeed.promotion import promote

    promote(_feed_store(), _tracker(), feed_item_id)


def _run_action(action, message: str) -> None:
    try:
        action()
    except JobFeedError as exc:
        st.error(str(exc))
        return
    st.toast(message)
    st.rerun()


# ── Page: Tracker ────────────────────────────────────────────────────────


def page_tracker() -> None:
    st.header("Tracker")

    try:
        jobs = _tracker().get_jobs()
    except JobFeedError as exc:
        log.warning("Tracker read failed: %s", exc)
        jobs = []

    if not jobs:
        st.info("No jobs tracked yet. Add some from the **Feed**.")
        return

    c1, c2, c3 = st.columns(3)
    c1.metric("Tracked", len(jobs))
    c2.metric("Applied", sum(1 for j in jobs if j.get("status") == "applied"))
    c3.metric("Starred", sum(1 for j in jobs if j.get("starred")))

    rows = [
        {
            "title": j.get("title", ""),
            "company": j.get("company", ""),
            "status": STATUS_LABELS.get(j.get("status", ""), j.get("status", "")),
            "rate": j.get("rate", ""),
            "location": j.get("location", ""),
            "jobLink": j.get("jobLink", ""),
            "notes": j.get("notes", ""),
        }
        for j in jobs
    ]
    st.dataframe(
        rows,
        use_container_width=True,
        column_config={"jobLink": st.column_config.LinkColumn("Link")},
        hide_index=True,
    )


# ── Page: Settings ───────────────────────────────────────────────────────


def page_settings() -> None:
    st.header("Settings")
    env = _load_env()

    with st.form("credentials"):
        st.subheader("Job Boards")
        c1, c2 = st.columns(2)
        with c1:
            reed = st.text_input("Reed API Key", value=env.get("REED_API_KEY", ""), type="password",
                                 help="https://www.reed.co.uk/developers")
            adzuna_id = st.text_input("Adzuna App ID", value=env.get("ADZUNA_APP_ID", ""),
                                      help="https://developer.adzuna.com — 250 free requests/day")
        with c2:
            adzuna_key = st.text_input("Adzuna App Key", value=env.get("ADZUNA_APP_KEY", ""), type="password")

        st.subheader("Storage")
        kv_url = st.text_input("KV REST API URL", value=env.get("KV_REST_API_URL", ""))
        kv_token = st.text_input("KV REST API Token", value=env.get("KV_REST_API_TOKEN", ""), type="password")

        st.subheader("Access")
        c1, c2 = st.columns(2)
        with c1:
            auth_secret = st.text_input("Auth secret", value=env.get("AUTH_SECRET", ""), type="password")
            cron_secret = st.text_input("Cron secret", value=env.get("CRON_SECRET", ""), type="password")
        with c2:
            site_password = st.text_input("Site password", value=env.get("SITE_PASSWORD", ""), type="password")
            scan_hour = st.text_input("Daily scan hour", value=env.get("SCAN_HOUR", "7"))

        if st.form_submit_button("Save All", type="primary", use_container_width=True):
            _save_env({
                "REED_API_KEY": reed, "ADZUNA_APP_ID": adzuna_id, "ADZUNA_APP_KEY": adzuna_key,
                "KV_REST_API_URL": kv_url, "KV_REST_API_TOKEN": kv_token,
                "AUTH_SECRET": auth_secret, "SITE_PASSWORD": site_password,
                "CRON_SECRET": cron_secret, "SCAN_HOUR": scan_hour,
            })
            st.success("Saved to .env. Restart the app to pick up new credentials.")


# ── Main ─────────────────────────────────────────────────────────────────


def _inject_css() -> None:
    st.markdown(_GLASS_CSS, unsafe_allow_html=True)


def _sidebar_status() -> None:
    with st.sidebar:
        st.divider()
        s = _status()
        st.markdown("**Status**")
        st.markdown(_check("Reed key", s["reed"]))
        st.markdown(_check("Adzuna keys", s["adzuna"]))
        st.markdown(_check("Storage", s["store"]))


def _wrap(page):
    def run() -> None:
        _inject_css()
        _sidebar_status()
        page()

    run.__name__ = page.__name__
    return run


pages = [
    st.Page(_wrap(page_feed), title="Feed", icon="📰", url_path="feed", default=True),
    st.Page(_wrap(page_tracker), title="Tracker", icon="📋", url_path="tracker"),
    st.Page(_wrap(page_settings), title="Settings", icon="⚙️", url_path="settings"),
]

nav = st.navigation(pages)
nav.run()
