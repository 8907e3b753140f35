"""
astroblog.content

Content helpers shared by the post endpoints (slugs, plain-text extraction,
reading-time estimates).
"""
