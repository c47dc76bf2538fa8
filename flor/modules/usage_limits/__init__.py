"""
Usage Limits Module

Monthly AI generation quota and total plant quota per user.
"""
