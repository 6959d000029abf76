# Wire event names. Every frame is {"event": <name>, "data": {...}}.

# server -> client
CONNECTION = "connection"
BROADCAST = "broadcast"

# one-to-one signaling (same name in both directions)
PRE_OFFER = "pre-offer"
PRE_OFFER_ANSWER = "pre-offer-answer"
WEBRTC_OFFER = "webRTC-offer"
WEBRTC_ANSWER = "webRTC-answer"
WEBRTC_CANDIDATE = "webRTC-candidate"
USER_HANG_UP = "user-hang-up"

# presence
REGISTER_NEW_USER = "register-new-user"

# group calls
GROUP_CALL_REGISTER = "group-call-register"
GROUP_CALL_REGISTER_LEGACY = "grop-call-register"  # misspelt name sent by older clients
GROUP_CALL_JOIN_REQUEST = "group-call-join-request"
GROUP_CALL_USER_LEFT = "group-call-user-left"
GROUP_CALL_CLOSED_BY_HOST = "group-call-closed-by-host"

# broadcast kinds, carried in the "event" field of a BROADCAST payload
ACTIVE_USERS = "ACTIVE_USERS"
GROUP_CALL_ROOMS = "GROUP_CALL_ROOMS"
