# Services package.
#
#   post_service  — listing, lookup and creation of posts and comments,
#                   with a cache-aside layer over PostRepository reads
#
# Service functions accept a PostRepository as their first argument; the
# repository owns sessions and transaction boundaries.
