"""Tests for modification request inference rules."""

import unittest

from domain.model.modification import (
    Actor,
    Issue,
    ModificationStatus,
    PreviewSource,
    PreviewUrl,
    PullRequest,
    branch_preview_slug,
    classify_request,
    fallback_preview_url,
    find_linked_pull_request,
    parse_title,
    references_issue,
    status_for_pull_request,
    truncate,
)

PREVIEW = PreviewUrl(url='https://preview.example.dev', source=PreviewSource.DEPLOYMENT)


def _pr(number=7, state='open', head_ref='copilot/fix-42', merged=False, body=None) -> PullRequest:
    return PullRequest(
        number=number,
        html_url=f"https://github.com/o/r/pull/{number}",
        state=state,
        head_ref=head_ref,
        merged=merged,
        body=body,
    )


def _issue(number=42, state='open', title='[AI] Make the header blue', body='') -> Issue:
    return Issue(number=number, html_url=f"https://github.com/o/r/issues/{number}", state=state, title=title, body=body)


class TestReferencesIssue(unittest.TestCase):
    """Test PR-to-issue linkage by branch name and body."""

    def test_branch_contains_number(self):
        self.assertTrue(references_issue(_pr(head_ref='copilot/fix-42'), 42))

    def test_branch_issue_prefix(self):
        self.assertTrue(references_issue(_pr(head_ref='issue-42-header'), 42))

    def test_branch_substring_match(self):
        """Test branch match is a plain substring check (issue 4 matches fix-42)."""
        self.assertTrue(references_issue(_pr(head_ref='copilot/fix-42'), 4))

    def test_body_fixes_pattern_case_insensitive(self):
        for body in ('Fixes #42', 'CLOSES #42', 'resolves  the issue #42.', 'Closes the header bug, see #42'):
            with self.subTest(body=body):
                self.assertTrue(references_issue(_pr(head_ref='main-work', body=body), 42))

    def test_body_requires_word_boundary(self):
        self.assertFalse(references_issue(_pr(head_ref='main-work', body='Fixes #421'), 42))

    def test_body_without_keyword(self):
        self.assertFalse(references_issue(_pr(head_ref='main-work', body='Related to #42'), 42))

    def test_no_body_no_branch_match(self):
        self.assertFalse(references_issue(_pr(head_ref='main-work', body=None), 42))


class TestFindLinkedPullRequest(unittest.TestCase):

    def test_first_match_wins(self):
        first = _pr(number=1, head_ref='copilot/fix-42')
        second = _pr(number=2, head_ref='other', body='Fixes #42')
        self.assertIs(find_linked_pull_request(42, [first, second]), first)

    def test_none_when_unmatched(self):
        self.assertIsNone(find_linked_pull_request(42, [_pr(head_ref='other')]))


class TestParseTitle(unittest.TestCase):
    """Test title prefix stripping and classification."""

    def test_plain_request(self):
        self.assertEqual(parse_title('[AI] Make the header blue'), ('Make the header blue', False, False))

    def test_revision(self):
        self.assertEqual(parse_title('[AI] Revision: Make it blue'), ('Make it blue', True, False))

    def test_revert(self):
        self.assertEqual(parse_title('[AI] Revert: PR #12'), ('PR #12', False, True))

    def test_prefix_only_stripped_at_start(self):
        self.assertEqual(parse_title('Fix [AI] Revision: x'), ('Fix [AI] Revision: x', False, False))

    def test_kind_prefix_without_ai_prefix(self):
        self.assertEqual(parse_title('Revert: thing'), ('thing', False, True))


class TestPreviewSlug(unittest.TestCase):
    """Test the branch-to-subdomain fallback."""

    def test_long_branch_truncated_to_28(self):
        slug = branch_preview_slug('feature/a-very-long-branch-name-exceeding-limit')
        self.assertEqual(len(slug), 28)
        self.assertEqual(slug, 'feature-a-very-long-branch-n')

    def test_lowercase_and_dashes(self):
        self.assertEqual(branch_preview_slug('Copilot/Fix-42'), 'copilot-fix-42')

    def test_short_branch_untouched_length(self):
        self.assertEqual(branch_preview_slug('main'), 'main')

    def test_fallback_url(self):
        self.assertEqual(
            fallback_preview_url('copilot/fix-42', 'webcomic-sandbox'),
            'https://copilot-fix-42.webcomic-sandbox.pages.dev',
        )


class TestStatusForPullRequest(unittest.TestCase):

    def test_no_pr_is_pending(self):
        self.assertEqual(status_for_pull_request(None, None), ModificationStatus.PENDING)

    def test_merged_wins_even_with_preview(self):
        self.assertEqual(status_for_pull_request(_pr(state='closed', merged=True), PREVIEW), ModificationStatus.MERGED)

    def test_open_with_preview(self):
        self.assertEqual(status_for_pull_request(_pr(), PREVIEW), ModificationStatus.PREVIEW_READY)

    def test_open_without_preview(self):
        self.assertEqual(status_for_pull_request(_pr(), None), ModificationStatus.PR_CREATED)


class TestClassifyRequest(unittest.TestCase):
    """Test listing status priority."""

    def test_replaced_beats_open_pr(self):
        issue = _issue(state='closed', body='... This replaces issue #12. ...')
        self.assertEqual(classify_request(issue, _pr(), PREVIEW), ModificationStatus.REPLACED)

    def test_replaced_requires_closed_issue(self):
        issue = _issue(state='open', body='This replaces issue #12.')
        self.assertEqual(classify_request(issue, _pr(), PREVIEW), ModificationStatus.PREVIEW_READY)

    def test_discarded_when_closed_unmerged(self):
        self.assertEqual(classify_request(_issue(), _pr(state='closed'), None), ModificationStatus.DISCARDED)

    def test_closed_and_merged_is_merged(self):
        self.assertEqual(
            classify_request(_issue(state='closed'), _pr(state='closed', merged=True), None),
            ModificationStatus.MERGED,
        )

    def test_pending_without_pr(self):
        self.assertEqual(classify_request(_issue(), None, None), ModificationStatus.PENDING)


class TestActor(unittest.TestCase):

    def test_bot_requires_login_and_kind(self):
        self.assertTrue(Actor(login='copilot-swe-agent', id='B1', kind='Bot').is_automation_bot)
        self.assertFalse(Actor(login='copilot-swe-agent', id='U1', kind='User').is_automation_bot)
        self.assertFalse(Actor(login='dependabot', id='B2', kind='Bot').is_automation_bot)


class TestTruncate(unittest.TestCase):

    def test_appends_ellipsis_only_when_cut(self):
        self.assertEqual(truncate('abcdef', 3), 'abc...')
        self.assertEqual(truncate('abc', 3), 'abc')


if __name__ == '__main__':
    unittest.main()
