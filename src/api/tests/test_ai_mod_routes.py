"""Unit tests for AI modification routes."""

import unittest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import httpx
from fastapi.testclient import TestClient
from api.main import app
from api.dependencies import get_code_host, get_preview_pages_project
from adapter.fake.code_host import FakeCodeHost
from adapter.github.client import GitHubClient
from adapter.github.code_host import GitHubCodeHost
from domain.model.modification import Actor, Issue, PullRequest


def _issue(number, state='open', title='[AI] Make the header blue', body='') -> Issue:
    return Issue(
        number=number,
        html_url=f"https://github.com/owner/repo/issues/{number}",
        state=state,
        title=title,
        body=body,
        created_at='2026-01-01T00:00:00Z',
    )


def _pr(number, head_ref, state='open', merged=False) -> PullRequest:
    return PullRequest(
        number=number,
        html_url=f"https://github.com/owner/repo/pull/{number}",
        state=state,
        head_ref=head_ref,
        merged=merged,
    )


class AiModRouteTestCase(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)
        self.host = FakeCodeHost(
            issues=[_issue(42)],
            pull_requests=[_pr(7, 'copilot/fix-42')],
        )
        app.dependency_overrides[get_code_host] = lambda: self.host
        app.dependency_overrides[get_preview_pages_project] = lambda: 'webcomic-sandbox'

    def tearDown(self):
        app.dependency_overrides.clear()


class TestRequestRoute(AiModRouteTestCase):
    """Test cases for POST /api/ai-mod/request."""

    def test_request_created(self):
        response = self.client.post('/api/ai-mod/request', json={'description': 'Make the footer red'})

        self.assertEqual(response.status_code, 201)
        data = response.json()['data']
        self.assertEqual(data['issueNumber'], 43)
        self.assertEqual(data['issueUrl'], 'https://github.com/owner/repo/issues/43')
        self.assertEqual(data['status'], 'pending')
        self.assertTrue(data['copilotAssigned'])
        self.assertEqual(data['assignment'], 'assigned')

    def test_request_response_keys(self):
        response = self.client.post('/api/ai-mod/request', json={'description': 'Make the footer red'})

        self.assertEqual(
            set(response.json()['data']),
            {'issueNumber', 'issueUrl', 'status', 'copilotAssigned', 'assignment'},
        )

    def test_request_with_bot_unavailable(self):
        self.host.actors = [Actor(login='octocat', id='U_1', kind='User')]

        response = self.client.post('/api/ai-mod/request', json={'description': 'Make the footer red'})

        self.assertEqual(response.status_code, 201)
        self.assertFalse(response.json()['data']['copilotAssigned'])
        self.assertEqual(response.json()['data']['assignment'], 'bot_unavailable')

    def test_blank_description(self):
        response = self.client.post('/api/ai-mod/request', json={'description': '  '})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'success': False, 'error': 'Description is required'})
        self.assertEqual(self.host.calls, [])

    def test_malformed_body(self):
        response = self.client.post(
            '/api/ai-mod/request',
            content=b'not json',
            headers={'Content-Type': 'application/json'},
        )

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()['success'])

    def test_platform_failure(self):
        self.host.failing.add('create_issue')

        response = self.client.post('/api/ai-mod/request', json={'description': 'x'})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['error'], 'Failed to create AI modification request')
        self.assertEqual(response.json()['details'], 'create_issue failed')


class TestStatusRoute(AiModRouteTestCase):
    """Test cases for GET /api/ai-mod/status."""

    def test_status_with_fallback_preview(self):
        response = self.client.get('/api/ai-mod/status', params={'issue': '42'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['data'], {
            'issueNumber': 42,
            'issueState': 'open',
            'prNumber': 7,
            'prUrl': 'https://github.com/owner/repo/pull/7',
            'prState': 'open',
            'previewUrl': 'https://copilot-fix-42.webcomic-sandbox.pages.dev',
            'previewSource': 'fallback',
            'status': 'preview_ready',
        })

    def test_status_requires_numeric_issue(self):
        cases = [{}, {'issue': 'abc'}, {'issue': ''}, {'issue': '-3'}, {'issue': '0'},
                 {'issue': '\u00b2'}, {'issue': '\u0664'}]
        for params in cases:
            with self.subTest(params=params):
                response = self.client.get('/api/ai-mod/status', params=params)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()['error'], 'Issue number is required')
        self.assertEqual(self.host.calls, [])

    def test_status_superscript_digit_is_rejected(self):
        response = self.client.get('/api/ai-mod/status?issue=%C2%B2')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'success': False, 'error': 'Issue number is required'})

    def test_status_unknown_issue(self):
        response = self.client.get('/api/ai-mod/status', params={'issue': '999'})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['error'], 'Failed to get status')


class TestListRoute(AiModRouteTestCase):

    def test_list_items(self):
        response = self.client.get('/api/ai-mod/list')

        self.assertEqual(response.status_code, 200)
        item = response.json()['data'][0]
        self.assertEqual(item['issueNumber'], 42)
        self.assertEqual(item['description'], 'Make the header blue')
        self.assertEqual(item['createdAt'], '2026-01-01T00:00:00Z')
        self.assertEqual(item['prNumber'], 7)
        self.assertEqual(item['prState'], 'open')
        self.assertEqual(item['status'], 'preview_ready')
        self.assertFalse(item['isRevision'])
        self.assertFalse(item['isRevert'])

    def test_list_failure(self):
        self.host.failing.add('list_issues')

        response = self.client.get('/api/ai-mod/list')

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['error'], 'Failed to list requests')


class TestDecisionRoutes(AiModRouteTestCase):
    """Test cases for approve, reject, revise and revert."""

    def test_approve_draft(self):
        self.host.drafts.add(7)

        response = self.client.post('/api/ai-mod/approve', json={'prNumber': 7})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['data'], {'prNumber': 7, 'merged': True, 'readyForReview': 'marked_ready'})
        self.assertEqual(self.host.merged, [(7, 'squash')])

    def test_approve_requires_pr_number(self):
        response = self.client.post('/api/ai-mod/approve', json={})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'PR number is required')

    def test_approve_merge_failure(self):
        self.host.failing.add('merge_pull_request')

        response = self.client.post('/api/ai-mod/approve', json={'prNumber': 7})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['error'], 'Failed to merge PR')

    def test_reject_with_issue(self):
        response = self.client.post('/api/ai-mod/reject', json={'prNumber': 7, 'issueNumber': 42})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['data'], {'prNumber': 7, 'closed': True})
        self.assertEqual(self.host.call_names(), ['close_pull_request', 'close_issue'])

    def test_reject_failure(self):
        self.host.failing.add('close_pull_request')

        response = self.client.post('/api/ai-mod/reject', json={'prNumber': 7})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['error'], 'Failed to reject changes')

    def test_revise(self):
        response = self.client.post('/api/ai-mod/revise', json={
            'issueNumber': 42,
            'prNumber': 7,
            'originalDescription': 'Make the header blue',
            'feedback': 'Navy, not sky blue',
        })

        self.assertEqual(response.status_code, 201)
        data = response.json()['data']
        self.assertEqual(data['issueNumber'], 43)
        self.assertEqual(data['replacedIssue'], 42)
        self.assertTrue(data['copilotAssigned'])
        self.assertNotIn('status', data)
        self.assertTrue(self.host.issues[42].is_closed)

    def test_revise_blank_feedback_makes_no_calls(self):
        response = self.client.post('/api/ai-mod/revise', json={
            'issueNumber': 42, 'prNumber': 7, 'originalDescription': 'x', 'feedback': '   ',
        })

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Feedback is required')
        self.assertEqual(self.host.calls, [])

    def test_revise_missing_numbers(self):
        response = self.client.post('/api/ai-mod/revise', json={'feedback': 'more'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Issue number and PR number are required')

    def test_revert(self):
        response = self.client.post('/api/ai-mod/revert', json={'prNumber': 5})

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['data']['issueNumber'], 43)
        self.assertEqual(self.host.issues[43].title, '[AI] Revert: PR #5')
        self.assertNotIn('replacedIssue', response.json()['data'])
        self.assertNotIn('status', response.json()['data'])

    def test_revert_requires_pr_number(self):
        response = self.client.post('/api/ai-mod/revert', json={'description': 'x'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'PR number is required')


class TestGatewayReplies(unittest.TestCase):
    """GitHub answering 200 with an HTML page still yields envelopes."""

    def setUp(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == 'POST' and request.url.path == '/repos/owner/repo/issues':
                return httpx.Response(201, json={
                    'number': 5,
                    'html_url': 'https://github.com/owner/repo/issues/5',
                    'state': 'open',
                    'title': '[AI] x',
                })
            return httpx.Response(200, text='<html>gateway</html>')

        client = GitHubClient('ghp_test', transport=httpx.MockTransport(handler))
        host = GitHubCodeHost(client, 'owner', 'repo')
        app.dependency_overrides[get_code_host] = lambda: host
        app.dependency_overrides[get_preview_pages_project] = lambda: 'webcomic-sandbox'
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_request_created_with_failed_assignment(self):
        response = self.client.post('/api/ai-mod/request', json={'description': 'x'})

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.headers['content-type'], 'application/json')
        data = response.json()['data']
        self.assertEqual(data['issueNumber'], 5)
        self.assertEqual(data['assignment'], 'failed')
        self.assertFalse(data['copilotAssigned'])

    def test_list_failure_is_enveloped(self):
        response = self.client.get('/api/ai-mod/list')

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['error'], 'Failed to list requests')
        self.assertIn('invalid JSON', response.json()['details'])


if __name__ == '__main__':
    unittest.main()
