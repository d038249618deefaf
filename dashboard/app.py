"""
Mock Portainer console for Redeployer demo runs.

Serves the minimal DOM the redeploy workflow relies on: login form,
environment blocklist, stacks table, stack page with the Editor tab, the
"Update the stack" region and the confirmation modal with the re-pull switch.
Redeploys are recorded in memory; stacks in FAILING_STACKS answer with an
error so the page shows an error toast.
"""

from html import escape
from string import Template
from urllib.parse import quote

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "demo-password"

ENVIRONMENTS = [
    {"id": 1, "name": "local"},
    {"id": 2, "name": "staging"},
]

STACKS_BY_ENVIRONMENT = {
    1: ["web", "worker", "proxy"],
    2: ["web", "broken"],
}

FAILING_STACKS = {"broken"}

# In-memory record of redeploy calls (reset between demo runs)
_redeploys: list[dict] = []

app = FastAPI(title="Mock Portainer Console", version="0.1.0")


class AuthBody(BaseModel):
    """Login form payload."""

    username: str
    password: str


class RedeployBody(BaseModel):
    """Stack update payload sent by the confirmation modal."""

    pull_image: bool = False


_PAGE = Template(
    """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>$title</title></head>
<body>
$body
</body>
</html>"""
)

_LOGIN_BODY = """
<form id="login-form">
  <input id="username" name="username" type="text">
  <input id="password" name="password" type="password">
  <button type="submit">Login</button>
  <p id="login-error" style="display:none">Invalid credentials</p>
</form>
<script>
document.getElementById('login-form').addEventListener('submit', function (event) {
  event.preventDefault();
  fetch('/api/auth', {
    method: 'POST',
    headers: {'Content-Type': 'application/json'},
    body: JSON.stringify({
      username: document.getElementById('username').value,
      password: document.getElementById('password').value
    })
  }).then(function (res) {
    if (res.ok) {
      window.location.href = '/home';
    } else {
      document.getElementById('login-error').style.display = 'block';
    }
  });
});
</script>
"""

_STACK_BODY = Template(
    """
<h1>$name</h1>
<ul class="nav-tabs">
  <li><a href="#" data-tab="stack">Stack</a></li>
  <li><a href="#" data-tab="editor">Editor</a></li>
</ul>
<div id="tab-stack">Stack $name</div>
<div id="tab-editor" style="display:none">
  <textarea>services: {}</textarea>
  <div authorization="PortainerStackUpdate">
    <button type="button" id="open-update">Update the stack</button>
  </div>
</div>
<template id="modal-template">
  <div class="app-react-components-modals-Modal-Modal-module__modal-content">
    <div>
      <label class="space-right">Re-pull image and redeploy</label>
      <div class="switch"><input type="checkbox" id="repull"></div>
    </div>
    <button type="button" class="btn btn-secondary">Cancel</button>
    <button type="button" class="btn btn-primary" id="confirm-update">Update</button>
  </div>
</template>
<div id="toasts"></div>
<script>
var redeployUrl = '$redeploy_url';
function showTab(name) {
  document.getElementById('tab-stack').style.display = name === 'stack' ? 'block' : 'none';
  document.getElementById('tab-editor').style.display = name === 'editor' ? 'block' : 'none';
}
function toast(kind, text) {
  var el = document.createElement('div');
  el.className = 'toast-' + kind;
  el.textContent = text;
  document.getElementById('toasts').appendChild(el);
}
document.querySelectorAll('ul.nav-tabs li a').forEach(function (a) {
  a.addEventListener('click', function (event) {
    event.preventDefault();
    showTab(a.getAttribute('data-tab'));
  });
});
document.getElementById('open-update').addEventListener('click', function () {
  var template = document.getElementById('modal-template');
  document.body.appendChild(template.content.cloneNode(true));
  document.getElementById('confirm-update').addEventListener('click', function () {
    var modal = document.querySelector('.app-react-components-modals-Modal-Modal-module__modal-content');
    fetch(redeployUrl, {
      method: 'POST',
      headers: {'Content-Type': 'application/json'},
      body: JSON.stringify({pull_image: document.getElementById('repull').checked})
    }).then(function (res) {
      return res.json().then(function (data) {
        if (res.ok) {
          modal.remove();
          toast('success', 'Stack successfully deployed');
        } else {
          toast('error', data.detail || 'Unable to update stack');
        }
      });
    });
  });
});
</script>
"""
)


def _page(title: str, body: str) -> HTMLResponse:
    return HTMLResponse(_PAGE.substitute(title=escape(title), body=body))


def _environment(env_id: int) -> dict:
    for environment in ENVIRONMENTS:
        if environment["id"] == env_id:
            return environment
    raise HTTPException(status_code=404, detail="Environment not found")


def _require_stack(env_id: int, stack_name: str) -> None:
    _environment(env_id)
    if stack_name not in STACKS_BY_ENVIRONMENT.get(env_id, []):
        raise HTTPException(status_code=404, detail="Stack not found")


@app.get("/", response_class=HTMLResponse)
def login_page():
    """Serve login form."""
    return _page("Login", _LOGIN_BODY)


@app.post("/api/auth")
def api_auth(body: AuthBody):
    """Accept only the demo admin credentials."""
    if body.username != ADMIN_USERNAME or body.password != ADMIN_PASSWORD:
        raise HTTPException(status_code=422, detail="Invalid credentials")
    return {"jwt": "demo-token"}


@app.get("/home", response_class=HTMLResponse)
def home_page():
    """Environment blocklist; each entry links to its dashboard."""
    items = []
    for environment in ENVIRONMENTS:
        items.append(
            '<div class="relative">'
            f'<a href="/{environment["id"]}/docker/dashboard">'
            '<div class="items-start"><div class="items-center">'
            f'<span>{escape(environment["name"])}</span>'
            "</div></div></a></div>"
        )
    return _page("Home", '<div class="blocklist">' + "".join(items) + "</div>")


@app.get("/{env_id}/docker/dashboard", response_class=HTMLResponse)
def environment_dashboard(env_id: int):
    environment = _environment(env_id)
    return _page("Dashboard", f"<h1>{escape(environment['name'])}</h1>")


@app.get("/{env_id}/docker/stacks", response_class=HTMLResponse)
def stacks_page(env_id: int):
    """Stacks table for one environment."""
    _environment(env_id)
    rows = "".join(
        f'<tr><td><a href="/{env_id}/docker/stacks/{quote(name)}">{escape(name)}</a></td></tr>'
        for name in STACKS_BY_ENVIRONMENT.get(env_id, [])
    )
    return _page("Stacks", f"<table><thead><tr><th>Name</th></tr></thead><tbody>{rows}</tbody></table>")


@app.get("/{env_id}/docker/stacks/{stack_name}", response_class=HTMLResponse)
def stack_page(env_id: int, stack_name: str):
    """Stack detail with Editor tab and update modal."""
    _require_stack(env_id, stack_name)
    body = _STACK_BODY.substitute(
        name=escape(stack_name),
        redeploy_url=f"/api/stacks/{env_id}/{quote(stack_name)}/redeploy",
    )
    return _page(stack_name, body)


@app.post("/api/stacks/{env_id}/{stack_name}/redeploy")
def api_redeploy(env_id: int, stack_name: str, body: RedeployBody):
    """Record a redeploy; stacks in FAILING_STACKS fail."""
    _require_stack(env_id, stack_name)
    if stack_name in FAILING_STACKS:
        raise HTTPException(status_code=500, detail=f"Failed to pull images for {stack_name}")
    record = {"environment_id": env_id, "stack": stack_name, "pull_image": body.pull_image}
    _redeploys.append(record)
    return {"ok": True, **record}


@app.get("/api/redeploys")
def api_redeploys():
    """Redeploys performed since the last reset, in order."""
    return {"redeploys": list(_redeploys)}


@app.get("/api/status")
def api_status():
    return {"version": "2.0.0-mock"}


def reset_demo_state():
    """Forget recorded redeploys (for repeated demo runs)."""
    _redeploys.clear()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=9000)
