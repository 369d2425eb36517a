USER_PK_ABBREV = 'user'

# Column widths of the users table
USERNAME_MAX_LENGTH = 255
PASSWORD_CREDENTIAL_MAX_LENGTH = 255

PASSWORD_MIN_LENGTH = 8
