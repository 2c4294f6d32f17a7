# Models package init
"""
P4P MIS Backend — Record Models
=================================

What:  Collection names and declarative coercion schemas for the records
       this API reads. There is no ORM: documents are read verbatim and only
       the fields named in a schema are coerced.
"""
