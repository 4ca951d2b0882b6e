"""Pytest configuration and shared fixtures."""

import pytest


@pytest.fixture
def team_reply_payload():
    return {
        "id": 202,
        "type": "message",
        "createdBy": {"id": 7, "type": "user", "first": "Dana", "last": "Lee"},
        "body": "<p>Thanks for reaching out!</p><p>The export button is under Settings.</p><p>Best regards</p>",
        "createdAt": "2024-05-01T10:05:00Z",
    }


@pytest.fixture
def customer_message_payload():
    return {
        "id": 201,
        "type": "customer",
        "createdBy": {"id": 3, "type": "customer", "first": "Sam"},
        "body": "Hi, where can I find the export button in the plugin?",
        "createdAt": "2024-05-01T10:00:00Z",
    }


@pytest.fixture
def verdict_payload():
    return {
        "overall_score": 8.5,
        "categories": {
            "tone_empathy": {"score": 9, "feedback": "Warm and thankful"},
            "clarity_completeness": {"score": 8, "feedback": "Clear"},
            "standard_of_english": {"score": 9, "feedback": "Natural phrasing"},
            "problem_resolution": {"score": 8, "feedback": "Answered the question"},
            "following_structure": {"score": 8, "feedback": "Greeting and sign-off present"},
        },
        "key_improvements": [],
    }
