from ai_reviewer.review.models import DiffFile, Hunk, PRContext

REVIEW_PROMPT = """Your task is to review pull requests. Instructions:
- Provide the response in following JSON format:  {{"reviews": [{{"lineNumber":  <line_number>, "reviewComment": "<review comment>"}}]}}
- Do not give positive comments or compliments.
- Provide comments and suggestions ONLY if there is something to improve, otherwise "reviews" should be an empty array.
- Write the comment in GitHub Markdown format.
- Use the given description only for the overall context and only comment the code.
- IMPORTANT: NEVER suggest adding comments to the code.

Review the following code diff in the file "{path}" and take the pull request title and description into account when writing the response.

Pull request title: {title}
Pull request description:

---
{description}
---

Git diff to review:

```diff
{hunk_header}
{numbered_changes}
```
"""


def build_review_prompt(file: DiffFile, hunk: Hunk, pr: PRContext) -> str:
    numbered_changes = "\n".join(f"{c.display_line} {c.content}" for c in hunk.changes)
    return REVIEW_PROMPT.format(
        path=file.path,
        title=pr.title,
        description=pr.description,
        hunk_header=hunk.content,
        numbered_changes=numbered_changes,
    )
