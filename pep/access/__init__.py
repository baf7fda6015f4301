"""Access validation pipeline (PEP side of an XACML-style decision service).

Each incoming request is checked by:
- rendering an access request from the startup-loaded template
- POSTing it to the decision service
- extracting the Decision text from the XML reply
- allowing the request only when the decision is Permit
"""
