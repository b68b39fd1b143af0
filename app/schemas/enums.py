from enum import Enum

class PresenceStatus(str, Enum):
    online = "online"
    offline = "offline"

class Gender(str, Enum):
    masculine = "masculine"
    feminine = "feminine"
    non_binary = "non-binary"
    other = "other"

class ImageContentType(str, Enum):
    jpeg = "image/jpeg"
    png = "image/png"
    webp = "image/webp"
