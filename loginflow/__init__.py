"""Login-submission workflow for a single login screen.

Modules:
    - auth: form validation, request building, direct login, gateway
    - identity: Google and Facebook sign-in
    - workflow: attempt state machine
    - dispatch: UI-context marshaling
    - screen: login view actions
    - config: YAML settings and secrets
"""
