"""
Sample feedback used by `python main.py seed`
"""

# (source, sentiment, comment)
SEED_FEEDBACK = [
    ('Customer Support Tickets', 'negative', 'Login page hangs after entering password. Had to try three times.'),
    ('Customer Support Tickets', 'negative', 'Password reset link said it expired in 1 hour but I clicked it in 20 minutes.'),
    ('Discord', 'neutral', 'The invite link for the beta channel returns 404. Can someone fix the link?'),
    ('Discord', 'negative', 'SSO login fails every time; works on the website but not Discord bot.'),
    ('GitHub issues', 'neutral', 'Issue status stuck on "needs info" even after I added the logs. What else is needed?'),
    ('GitHub issues', 'negative', 'Labels are confusing. Is "needs info" the same as "blocked on user"?'),
    ('GitHub issues', 'positive', 'Appreciate the clear issue triage workflow once you get past the labels.'),
    ('email', 'negative', 'Notification emails never arrive. Checked spam; nothing.'),
    ('email', 'neutral', 'Email verification failed with "invalid or expired token" on first click.'),
    ('email', 'negative', 'Support replied after 5 days. By then I had already fixed the issue myself.'),
    ('X/Twitter', 'negative', 'Login with Google just redirects to homepage. Still not fixed.'),
    ('X/Twitter', 'neutral', 'Docs say to use the blue button but I only see a grey one. Which is correct?'),
    ('community forums', 'negative', 'Validation error when submitting the form: "Invalid format" even with a valid value.'),
    ('community forums', 'neutral', 'Documentation is scattered. Hard to find the right page for setup.'),
    ('Customer Support Tickets', 'negative', 'API requests return 504 gateway timeout during business hours.'),
    ('Customer Support Tickets', 'neutral', 'Waiting two days for a reply from support on a billing question.'),
    ('Discord', 'positive', 'The new guide for webhooks is great, docs finally make sense.'),
    ('community forums', 'positive', 'Love the consolidated feedback view, makes prioritization easier.'),
    ('email', 'positive', 'Login with SSO works smoothly now, thanks for the quick fix.'),
    ('X/Twitter', 'negative', 'API timeout again on the export endpoint. Third time this week.'),
]
