import pytest

from ai_reviewer.config import Settings
from ai_reviewer.llm.schemas import ReviewPayload
from ai_reviewer.review.models import PRContext

A_TS_DIFF = """diff --git a/a.ts b/a.ts
index 1111111..2222222 100644
--- a/a.ts
+++ b/a.ts
@@ -8,2 +8,4 @@ function f() {
 const a = 1;
 const b = 2;
+const c = 3;
+const d = 4;
"""

DELETED_DIFF = """diff --git a/old.py b/old.py
deleted file mode 100644
index 3333333..0000000
--- a/old.py
+++ /dev/null
@@ -1,2 +0,0 @@
-x = 1
-y = 2
"""

MULTI_DIFF = """diff --git a/src/b.py b/src/b.py
index 4444444..5555555 100644
--- a/src/b.py
+++ b/src/b.py
@@ -1,3 +1,3 @@
 import os
-import sys
+import re
 
@@ -20,2 +20,3 @@ def main():
     run()
+    stop()
     return 0
diff --git a/docs/readme.md b/docs/readme.md
index 6666666..7777777 100644
--- a/docs/readme.md
+++ b/docs/readme.md
@@ -1 +1,2 @@
 # Title
+Some text
"""


class FakeLLM:
    """Возвращает заранее заданный ответ по пути файла из промпта."""

    def __init__(self, responses=None, default=None):
        self.responses = responses or {}
        self.default = default
        self.prompts = []

    def get_review(self, prompt):
        self.prompts.append(prompt)
        for path, payload in self.responses.items():
            if f'in the file "{path}"' in prompt:
                return _as_payload(payload)
        return _as_payload(self.default)


class FakePoster:
    def __init__(self):
        self.calls = []

    def post_review(self, comments):
        self.calls.append(list(comments))


def _as_payload(payload):
    if payload is None or isinstance(payload, ReviewPayload):
        return payload
    return ReviewPayload.model_validate(payload)


@pytest.fixture
def settings():
    return Settings(_env_file=None, exclude="", include="", max_workers=1)


@pytest.fixture
def pr_context():
    return PRContext(owner="octo", repo="demo", pull_number=7, title="Add c and d", description="Adds two constants")
