"""
Integration tests for the GitHub API client.

These tests verify the client against GitHub API responses
(mocked at the requests session level).
"""

import base64
import json
import threading
import pytest
from http.server import BaseHTTPRequestHandler, HTTPServer
from unittest.mock import Mock, patch
from datetime import datetime

import requests

from cherry_pick_verifier.github.client import GitHubClient, GitHubAPIError, RateLimitExceeded


def make_response(status_code=200, json_data=None, headers=None):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = json_data if json_data is not None else {}
    response.content = b'{}' if json_data is not None else b''
    response.headers = headers or {}
    return response


class TestGitHubClient:
    """Test GitHub API client functionality."""

    def setup_method(self):
        """Set up test fixtures."""
        self.client = GitHubClient("test_token")

    def test_client_initialization(self):
        assert self.client.base_url == "https://api.github.com"
        assert self.client.session.headers["Authorization"] == "token test_token"
        assert self.client.session.headers["Accept"] == "application/vnd.github.v3+json"

    def test_no_retries_by_default(self):
        adapter = self.client.session.get_adapter("https://api.github.com")

        assert adapter.max_retries.total == 0

    def test_empty_token_rejected(self):
        with pytest.raises(ValueError):
            GitHubClient("")

    @patch('requests.Session.request')
    def test_find_pull_requests(self, mock_request):
        mock_request.return_value = make_response(json_data=[
            {
                'number': 7,
                'html_url': 'https://github.com/fork/product/pull/7',
                'head': {'ref': 'auto-cherry-pick', 'sha': 'abc123'},
                'base': {'ref': 'main'},
            }
        ], headers={'X-RateLimit-Remaining': '4999'})

        prs = self.client.find_pull_requests('fork', 'product', 'auto-cherry-pick')

        assert len(prs) == 1
        assert prs[0].number == 7
        assert prs[0].head_sha == 'abc123'
        assert self.client.rate_limit_remaining == 4999

        method, url = mock_request.call_args[0]
        assert method == 'GET'
        assert url == 'https://api.github.com/repos/fork/product/pulls'
        assert mock_request.call_args[1]['params']['head'] == 'fork:auto-cherry-pick'
        assert mock_request.call_args[1]['params']['state'] == 'open'

    @patch('requests.Session.request')
    def test_list_issue_comments_paginates(self, mock_request):
        first_page = [{'id': i, 'body': f'comment {i}'} for i in range(100)]
        second_page = [{'id': 100, 'body': 'last'}]
        mock_request.side_effect = [make_response(json_data=first_page), make_response(json_data=second_page)]

        comments = self.client.list_issue_comments('fork', 'product', 7)

        assert len(comments) == 101
        assert comments[-1]['body'] == 'last'
        assert mock_request.call_args_list[1][1]['params']['page'] == 2

    @patch('requests.Session.request')
    def test_create_issue_comment(self, mock_request):
        mock_request.return_value = make_response(status_code=201, json_data={'id': 99})

        created = self.client.create_issue_comment('fork', 'product', 7, '## report')

        assert created['id'] == 99
        method, url = mock_request.call_args[0]
        assert method == 'POST'
        assert url.endswith('/repos/fork/product/issues/7/comments')
        assert mock_request.call_args[1]['json'] == {'body': '## report'}

    @patch('requests.Session.request')
    def test_compare_commits(self, mock_request):
        mock_request.return_value = make_response(json_data={
            'status': 'ahead',
            'files': [
                {'filename': 'src/main.py', 'status': 'modified', 'additions': 1, 'deletions': 1,
                 'patch': '@@ -1 +1 @@\n-a\n+b'},
                {'filename': 'logo.png', 'status': 'added', 'additions': 0, 'deletions': 0},
            ],
        })

        files = self.client.compare_commits('upstream', 'product', 'v1.0.0', 'v1.1.0')

        assert [f.filename for f in files] == ['src/main.py', 'logo.png']
        assert files[1].patch == ''
        url = mock_request.call_args[0][1]
        assert url.endswith('/repos/upstream/product/compare/v1.0.0...v1.1.0')

    @patch('requests.Session.request')
    def test_compare_commits_single_request(self, mock_request):
        mock_request.return_value = make_response(json_data={
            'files': [
                {'filename': f'src/f{i}.py', 'status': 'modified', 'additions': 1, 'deletions': 0, 'patch': '+x'}
                for i in range(150)
            ],
        })

        files = self.client.compare_commits('upstream', 'product', 'v1.0.0', 'v1.1.0')

        assert len(files) == 150
        assert mock_request.call_count == 1
        assert 'params' not in mock_request.call_args[1]

    @patch('requests.Session.request')
    def test_compare_commits_quotes_refs(self, mock_request):
        mock_request.return_value = make_response(json_data={'files': []})

        self.client.compare_commits('upstream', 'product', 'release/1.0', 'release/1.1')

        url = mock_request.call_args[0][1]
        assert url.endswith('/compare/release%2F1.0...release%2F1.1')

    @patch('requests.Session.request')
    def test_get_file_content_decodes_base64(self, mock_request):
        encoded = base64.b64encode('print("hi")\n'.encode('utf-8')).decode('ascii')
        mock_request.return_value = make_response(json_data={
            'type': 'file', 'encoding': 'base64', 'content': encoded,
        })

        content = self.client.get_file_content('fork', 'product', 'src/main.py', 'abc123')

        assert content == 'print("hi")\n'
        assert mock_request.call_args[1]['params'] == {'ref': 'abc123'}

    @patch('requests.Session.request')
    def test_get_file_content_directory(self, mock_request):
        mock_request.return_value = make_response(json_data=[{'type': 'file', 'name': 'a.py'}])

        with pytest.raises(GitHubAPIError):
            self.client.get_file_content('fork', 'product', 'src', 'main')

    @patch('requests.Session.request')
    def test_not_found(self, mock_request):
        mock_request.return_value = make_response(status_code=404, json_data={'message': 'Not Found'})

        with pytest.raises(GitHubAPIError) as exc_info:
            self.client.get_file_content('fork', 'product', 'missing.py', 'abc123')

        assert exc_info.value.status_code == 404
        assert 'Not Found' in str(exc_info.value)

    @patch('requests.Session.request')
    def test_rate_limit_handling(self, mock_request):
        mock_request.return_value = make_response(status_code=429, headers={
            'X-RateLimit-Reset': str(int(datetime.now().timestamp()) + 3600)
        })

        with pytest.raises(RateLimitExceeded):
            self.client.list_issue_comments('fork', 'product', 7)

    @patch('requests.Session.request')
    def test_connection_error(self, mock_request):
        mock_request.side_effect = requests.ConnectionError("boom")

        with pytest.raises(GitHubAPIError, match="Request failed"):
            self.client.compare_commits('upstream', 'product', 'v1', 'v2')

    @patch('requests.Session.request')
    def test_list_release_tags(self, mock_request):
        mock_request.return_value = make_response(json_data=[
            {'tag_name': 'v1.1.0'}, {'tag_name': 'v1.0.0'}, {'name': 'draft without tag'},
        ])

        assert self.client.list_release_tags('upstream', 'product') == ['v1.1.0', 'v1.0.0']


class StatusHandler(BaseHTTPRequestHandler):
    """Answers every request with the status encoded in the path, e.g. /status/429."""

    def do_GET(self):
        status = int(self.path.rstrip('/').split('/')[-1])
        body = json.dumps({'message': f'status {status}'}).encode('utf-8')
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Content-Length', str(len(body)))
        if status == 429:
            self.send_header('X-RateLimit-Remaining', '0')
            self.send_header('X-RateLimit-Reset', str(int(datetime.now().timestamp()) + 60))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def local_api():
    server = HTTPServer(('127.0.0.1', 0), StatusHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()


class TestGitHubClientOverHTTP:
    """Error handling through the real requests/urllib3 adapter stack."""

    def test_rate_limit_response(self, local_api):
        client = GitHubClient("test_token", base_url=local_api)

        with pytest.raises(RateLimitExceeded) as exc_info:
            client._make_request('GET', '/status/429')

        assert exc_info.value.status_code == 429
        assert client.rate_limit_remaining == 0

    @pytest.mark.parametrize('status', [500, 502, 503])
    def test_server_error_keeps_status(self, local_api, status):
        client = GitHubClient("test_token", base_url=local_api)

        with pytest.raises(GitHubAPIError) as exc_info:
            client._make_request('GET', f'/status/{status}')

        assert exc_info.value.status_code == status
        assert exc_info.value.response_data == {'message': f'status {status}'}
        assert f'GitHub API error: {status}' in str(exc_info.value)

    def test_not_found_keeps_status(self, local_api):
        client = GitHubClient("test_token", base_url=local_api)

        with pytest.raises(GitHubAPIError) as exc_info:
            client._make_request('GET', '/status/404')

        assert exc_info.value.status_code == 404
