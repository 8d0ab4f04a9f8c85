"""
Services module - store access and the job/application workflows.
"""
