"""
Server-rendered pages
"""

from html import escape
from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_user_id
from app.config import settings
from app.core.gate import safe_return_path
from app.models.subscription import Subscription
from app.services import analytics
from app.services.repository import OwnedRecordRepository

router = APIRouter()

PAGE = """<!doctype html>
<html><head><meta charset="utf-8"><title>{title} - {project}</title></head>
<body><h1>{title}</h1>{body}</body></html>"""

def _render(title: str, body: str) -> HTMLResponse:
    return HTMLResponse(PAGE.format(title=escape(title), project=escape(settings.PROJECT_NAME), body=body))

# The auth endpoints take JSON, so the form is submitted with fetch
SUBMIT_SCRIPT = """<script>
document.querySelector("form").addEventListener("submit", async (event) => {
  event.preventDefault();
  const fields = Object.fromEntries(
    [...new FormData(event.target)].filter(([, value]) => value !== ""));
  const response = await fetch(event.target.action, {
    method: "POST",
    headers: {"Content-Type": "application/json"},
    body: JSON.stringify(fields),
  });
  if (response.ok) {
    window.location.href = event.target.dataset.next;
  } else {
    document.querySelector("#error").textContent = "Could not sign you in";
  }
});
</script>"""

def _auth_form(action: str, with_name: bool, next_path: Optional[str]) -> str:
    name_field = '<input name="name" placeholder="Name">' if with_name else ""
    return (
        f'<form action="{settings.API_V1_STR}/auth/{action}" '
        f'data-next="{escape(safe_return_path(next_path))}">'
        f'{name_field}<input name="email" type="email" placeholder="Email">'
        '<input name="password" type="password" placeholder="Password">'
        '<button type="submit">Continue</button></form>'
        '<p id="error"></p>' + SUBMIT_SCRIPT
    )

@router.get("/login", response_class=HTMLResponse)
async def login_page(next_path: Optional[str] = Query(None, alias="from")):
    return _render("Log in", _auth_form("login", with_name=False, next_path=next_path))

@router.get("/signup", response_class=HTMLResponse)
async def signup_page(next_path: Optional[str] = Query(None, alias="from")):
    return _render("Sign up", _auth_form("signup", with_name=True, next_path=next_path))

@router.get("/", response_class=HTMLResponse)
async def dashboard(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Subscription summary for the signed-in user"""
    subscriptions = await OwnedRecordRepository(Subscription, db).list(user_id)
    stats = analytics.subscription_stats(subscriptions)

    renewals = "".join(
        f"<li>{escape(sub.name)} - {sub.price:.2f} {escape(sub.currency)} on {sub.billing_date:%Y-%m-%d}</li>"
        for sub in stats['upcoming_renewals']
    )
    categories = "".join(
        f"<li>{escape(name)}: {value:.2f}</li>"
        for name, value in sorted(stats['spending_by_category'].items())
    )
    body = (
        f"<p>Monthly: {stats['total_monthly']:.2f} / Annual: {stats['total_annual']:.2f}</p>"
        f"<h2>Upcoming renewals</h2><ul>{renewals}</ul>"
        f"<h2>By category</h2><ul>{categories}</ul>"
    )
    return _render("Dashboard", body)
