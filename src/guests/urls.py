RSVP_URL_PREFIX = "/api/v1/rsvp"

VERIFY_TOKEN_URL = f"{RSVP_URL_PREFIX}/verify"

SUBMIT_STAGE1_URL = RSVP_URL_PREFIX + "/{token}/stage1"
SUBMIT_STAGE2_URL = RSVP_URL_PREFIX + "/{token}/stage2"
SUBMIT_COMBINED_URL = RSVP_URL_PREFIX + "/{token}/combined"
SUBMIT_LEGACY_URL = RSVP_URL_PREFIX + "/{token}/submit"
