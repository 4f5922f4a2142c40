"""
Demo applications for dsauthz.
"""
