# Services package init
"""
Snippetbox — Services Layer
=============================

What:  Data-access layer sitting between routes (HTTP) and the database.
Why:   Routes handle HTTP; services own the SQL and translate driver results
       into domain exceptions.
How:   Stateless service objects receive the request's AsyncSession on every
       call; routes import the module-level singletons.

Service Inventory:
    - SnippetService: insert, get (unexpired only), latest ten
    - UserService: insert (bcrypt), authenticate, exists
"""
