# 📄 File: flor/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Common building blocks every part of Flor uses: settings, database access, photo storage,
# errors and logging.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel package for configuration, infrastructure and cross-cutting concerns.

"""
Shared Kernel

- config: settings, database engine options, Supabase client
- core: exceptions and authentication dependencies
- infrastructure: database connection/session managers, photo storage
- utils: logging and retry/timeout helpers
"""
