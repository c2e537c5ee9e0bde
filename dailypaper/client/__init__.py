"""
Client application for the Daily Paper service.

A page router over six async views that talk to the REST API and the hosted
identity provider. Rendering is left to whichever front end drives the views.
"""
