"""
Core domain logic: severity classification and access rules.
"""
