"""Template for newly created session documents."""

SESSION_TEMPLATE = """# Session: {date}
**Date:** {date}
**Started:** {time}
**Last Updated:** {time}

---

## Current State

[Session context goes here]

### Completed
- [ ]

### In Progress
- [ ]

### Notes for Next Session
-

### Context to Load
```
[relevant files]
```
"""


def render_session_template(date_str: str, time_str: str) -> str:
    """Render the document written when a session file is first created.

    Args:
        date_str: Date in YYYY-MM-DD form
        time_str: Time in HH:MM form

    Returns:
        Session document text
    """
    return SESSION_TEMPLATE.format(date=date_str, time=time_str)
