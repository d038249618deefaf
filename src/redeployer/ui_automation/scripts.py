"""
Selectors and in-page scripts for the Portainer console.

These are the console's implicit DOM contract. Scripts only ever return plain
values (booleans, strings, small dicts) so callers depend on result shape,
not on how the page is queried.
"""

# Login / home
USERNAME_INPUT = "#username"
PASSWORD_INPUT = "#password"
LOGIN_SUBMIT = 'button[type="submit"]'
HOME_LANDMARK = "div.blocklist"
ENVIRONMENT_ITEMS = ".blocklist .relative"

# Stacks list
STACKS_TABLE = "table"
STACK_LINKS = "table tbody tr td a"

# Stack detail / editor
STACK_TABS = "ul.nav-tabs"
EDITOR_TAB_LABEL = "Editor"
UPDATE_REGION = 'div[authorization="PortainerStackUpdate"]'
UPDATE_BUTTON = f"{UPDATE_REGION} button"
MODAL_CONTENT = ".app-react-components-modals-Modal-Modal-module__modal-content"
REPULL_LABEL_TEXT = "Re-pull image and redeploy"
CONFIRM_BUTTON_TEXT = "Update"

# Notifications
ERROR_TOAST = ".toast-error, .Toastify__toast--error"
SUCCESS_TOAST = ".toast-success, .Toastify__toast--success"

# [{name, dashboard}] per environment entry; run against ENVIRONMENT_ITEMS
EXTRACT_ENVIRONMENTS = """
(elements) => elements.map((el) => {
  const span = el.querySelector('.items-start .items-center span');
  const anchor = el.querySelector('a');
  return {
    name: span && span.innerText ? span.innerText.trim() : '',
    dashboard: anchor && anchor.href ? anchor.href : '',
  };
})
"""

# [{name, link}] per stack row link; run against STACK_LINKS
EXTRACT_STACKS = """
(links) => links.map((link) => ({
  name: (link.innerText || '').trim(),
  link: link.href || '',
}))
"""

# -> bool; clicks the first nav tab whose text contains the label
CLICK_EDITOR_TAB = """
(label) => {
  const tabs = Array.from(document.querySelectorAll('ul.nav-tabs li a'));
  const tab = tabs.find((t) => t.textContent.includes(label));
  if (!tab) {
    return false;
  }
  tab.click();
  return true;
}
"""

# -> {activated: bool, reason: string}
ACTIVATE_REPULL = """
(labelText) => {
  const label = Array.from(document.querySelectorAll('label.space-right')).find(
    (l) => l.textContent.trim() === labelText
  );
  if (!label) {
    return { activated: false, reason: 'switch label not found' };
  }
  const container = label.nextElementSibling;
  if (!container || !container.classList.contains('switch')) {
    return { activated: false, reason: 'switch container not found' };
  }
  const checkbox = container.querySelector('input[type="checkbox"]');
  if (!checkbox) {
    return { activated: false, reason: 'checkbox not found' };
  }
  checkbox.click();
  return { activated: true, reason: '' };
}
"""

# -> "clicked" | "modal-missing" | "missing" | "disabled"
CONFIRM_UPDATE = """
([modalSelector, buttonText]) => {
  const modal = document.querySelector(modalSelector);
  if (!modal) {
    return 'modal-missing';
  }
  const button = Array.from(modal.querySelectorAll('button.btn.btn-primary')).find(
    (b) => b.textContent.trim() === buttonText
  );
  if (!button) {
    return 'missing';
  }
  if (button.disabled) {
    return 'disabled';
  }
  button.click();
  return 'clicked';
}
"""

# -> "success" | "in-progress" | "unknown"; first match wins
OBSERVE_STATUS = """
([regionSelector, successSelector, modalSelector]) => {
  if (document.querySelector(regionSelector)) {
    return 'success';
  }
  if (document.querySelector(successSelector)) {
    return 'success';
  }
  if (document.querySelector(modalSelector)) {
    return 'in-progress';
  }
  return 'unknown';
}
"""

CONFIRM_CLICKED = "clicked"
