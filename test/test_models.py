#!/usr/bin/env python3
import json
import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from sentry_proxy.models import Embed, Field, NotificationPayload


class TestNotificationPayload(unittest.TestCase):
    def test_json_shape(self):
        payload = NotificationPayload(embeds=[
            Embed(title='Boom', url='https://sentry.io/i/1/', color=16006944,
                  fields=[Field('Project', 'api', inline=True), Field('Culprit', 'x.py')]),
        ])
        self.assertEqual(payload.to_dict(), {
            'content': '',
            'embeds': [{
                'title': 'Boom',
                'url': 'https://sentry.io/i/1/',
                'description': '',
                'color': 16006944,
                'fields': [
                    {'name': 'Project', 'value': 'api', 'inline': True},
                    {'name': 'Culprit', 'value': 'x.py', 'inline': False},
                ],
            }],
        })

    def test_empty_lists_are_omitted(self):
        self.assertEqual(NotificationPayload().to_dict(), {'content': ''})
        embed = Embed(title='t', url='', color=1).to_dict()
        self.assertNotIn('fields', embed)

    def test_serialize_and_parse_back(self):
        payload = NotificationPayload(embeds=[
            Embed(title='Boom', url='u', color=16777215,
                  fields=[Field('Level', 'fatal', inline=True), Field('Timestamp', '2021-01-07 06:13:20 +0000 UTC')]),
        ])
        parsed = NotificationPayload.from_dict(json.loads(json.dumps(payload.to_dict())))
        self.assertEqual(parsed, payload)
        self.assertIsInstance(parsed.embeds[0].color, int)
        self.assertIs(parsed.embeds[0].fields[0].inline, True)
        self.assertIs(parsed.embeds[0].fields[1].inline, False)


if __name__ == '__main__':
    unittest.main()
